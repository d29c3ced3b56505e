"""DailyGrowthLog: one observation entry per calendar day.

Captures the weather, the plot's condition, photos and the farm activity of
the day.  Harvest figures for the same day are not stored here; they are
attached on read from ``harvest_records`` (see ``app.services.growth_logs``).
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Float, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class FarmActivityType(str, enum.Enum):
    NONE = "NONE"
    FERTILIZE = "FERTILIZE"
    PRUNE = "PRUNE"
    IRRIGATE = "IRRIGATE"
    HARVEST = "HARVEST"
    ABNORMAL = "ABNORMAL"


class DailyGrowthLog(Base):
    __tablename__ = "daily_growth_logs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    date: Mapped[datetime] = mapped_column(DateTime, unique=True, nullable=False)

    plot_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("plots.id", ondelete="SET NULL"), index=True
    )
    recorder_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("personnel.id", ondelete="SET NULL"), index=True
    )
    # Name as typed by the recorder, kept even when no personnel row matches
    recorder_name: Mapped[str | None] = mapped_column(String(100))

    main_image_url: Mapped[str | None] = mapped_column(String(500))
    # {"priority": 3, "type": "info", "text": "施肥", "color": "#17a2b8"}
    status_tag: Mapped[dict | None] = mapped_column(JSON)
    # {"icon": "☀️", "temperature_range": "18~26℃"}
    weather: Mapped[dict | None] = mapped_column(JSON)
    detail_gallery: Mapped[list | None] = mapped_column(JSON)
    photo_info: Mapped[dict | None] = mapped_column(JSON)
    # {"temperature": "22℃", "humidity": "70%", "rainfall": "3.5mm", ...}
    environment_data: Mapped[dict | None] = mapped_column(JSON)
    # {"title": "...", "description": "...", "measures_taken": "..."}
    abnormal_event: Mapped[dict | None] = mapped_column(JSON)

    summary: Mapped[str | None] = mapped_column(Text)
    full_log: Mapped[str | None] = mapped_column(Text)

    farm_activity_type: Mapped[FarmActivityType] = mapped_column(
        SAEnum(FarmActivityType), default=FarmActivityType.NONE
    )
    farm_activity_log: Mapped[str | None] = mapped_column(Text)
    phenological_observation: Mapped[str | None] = mapped_column(Text)
    harvest_weight_kg: Mapped[float] = mapped_column(Float, default=0.0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    plot = relationship("Plot", lazy="selectin")
    recorder = relationship("Personnel", lazy="selectin")
