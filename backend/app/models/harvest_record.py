"""HarvestRecord: a single day's picking of fresh leaf.

``category_id`` / ``category_name`` are derived from ``harvest_date`` by the
category classifier and recomputed whenever the date changes.  A record is
consumed by at most one Batch (``assigned_batch_id``).
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class HarvestRecord(Base):
    __tablename__ = "harvest_records"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    harvest_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    fresh_leaf_weight_kg: Mapped[float] = mapped_column(Float, default=0.0)

    # {"icon": "☀️", "temperature_range": "18~26℃"}
    weather: Mapped[dict | None] = mapped_column(JSON)
    images_and_videos: Mapped[list | None] = mapped_column(JSON)
    media_urls: Mapped[list | None] = mapped_column(JSON)
    # {"leader_name": "...", "member_count": 6}
    harvest_team: Mapped[dict | None] = mapped_column(JSON)

    # Harvest lead (Personnel with role HARVEST_LEAD)
    harvest_team_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("personnel.id", ondelete="SET NULL"), index=True
    )

    # ── Derived classification ───────────────────────────────
    category_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("tea_categories.id", ondelete="SET NULL"), index=True
    )
    category_name: Mapped[str | None] = mapped_column(String(100))

    assigned_batch_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("batches.id", ondelete="SET NULL"), index=True
    )
    notes: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    harvest_leader = relationship("Personnel", lazy="selectin")
    category = relationship("TeaCategory", lazy="selectin")
