import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class MonthlySummary(Base):
    """Aggregate of one month's growth logs and harvests, keyed by ``YYYY-MM``."""

    __tablename__ = "monthly_summaries"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    year_month: Mapped[str] = mapped_column(String(7), unique=True, nullable=False)
    plot_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("plots.id", ondelete="SET NULL")
    )

    detail_gallery: Mapped[list | None] = mapped_column(JSON)
    # {"count": 3, "total_weight": 42.5}
    harvest_stats: Mapped[dict | None] = mapped_column(JSON)
    # [{"date": "2024/4/5", "issue": "...", "measures": "..."}]
    abnormal_summary: Mapped[list | None] = mapped_column(JSON)
    # {"avg_temp": "12℃~18℃", "total_precipitation": "35.0mm"}
    climate_summary: Mapped[dict | None] = mapped_column(JSON)
    # Newline-separated "4月5日 施肥" lines
    farm_calendar: Mapped[str | None] = mapped_column(Text)
    next_month_plan: Mapped[list | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    plot = relationship("Plot", lazy="selectin")
