from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class BatchHarvestRecord(Base):
    """Link between a Batch and the harvest records it was made from."""

    __tablename__ = "batch_harvest_records"

    batch_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("batches.id", ondelete="CASCADE"), primary_key=True
    )
    harvest_record_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("harvest_records.id", ondelete="CASCADE"),
        primary_key=True,
    )
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    batch = relationship("Batch", back_populates="harvest_links")
    harvest_record = relationship("HarvestRecord", lazy="selectin")
