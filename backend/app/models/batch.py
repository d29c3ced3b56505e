"""Batch: a production run of finished tea.

A Batch groups one or more harvest records (via ``batch_harvest_records``)
and records the processing steps, tasting notes and final weight.  Only
PUBLISHED batches are visible on the public traceability pages.

Lifecycle:  IN_PROGRESS → COMPLETED → PUBLISHED
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Float, ForeignKey, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class BatchStatus(str, enum.Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    PUBLISHED = "PUBLISHED"


class Batch(Base):
    __tablename__ = "batches"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    batch_number: Mapped[str] = mapped_column(
        String(100), unique=True, nullable=False, index=True
    )
    category_name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # ── Tea master ───────────────────────────────────────────
    # Snapshot of the master as entered: {"name": "...", "avatar_url": "..."}
    tea_master: Mapped[dict | None] = mapped_column(JSON)
    tea_master_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("personnel.id", ondelete="SET NULL")
    )

    # ── Production ───────────────────────────────────────────
    # [{"step_name": "摊晾", "step_order": 1, "craft_type": "manual",
    #   "manual_craft": {...}, "modern_craft": {...}}, ...]
    production_steps: Mapped[list | None] = mapped_column(JSON)
    tasting_report: Mapped[dict | None] = mapped_column(JSON)
    product_appreciation: Mapped[dict | None] = mapped_column(JSON)
    final_product_weight_kg: Mapped[float | None] = mapped_column(Float)

    # ── Grade ────────────────────────────────────────────────
    grade: Mapped[str | None] = mapped_column(String(100))
    grade_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("grades.id", ondelete="SET NULL")
    )

    production_date: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, index=True
    )
    status: Mapped[BatchStatus] = mapped_column(
        SAEnum(BatchStatus), default=BatchStatus.IN_PROGRESS, index=True
    )

    # ── Presentation ─────────────────────────────────────────
    cover_image_url: Mapped[str | None] = mapped_column(String(500))
    detail_cover_image_url: Mapped[str | None] = mapped_column(String(500))
    images_and_videos: Mapped[list | None] = mapped_column(JSON)
    notes: Mapped[str | None] = mapped_column(Text)
    detail_title: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    # ── Relationships ────────────────────────────────────────
    tea_master_ref = relationship("Personnel", lazy="selectin")
    grade_ref = relationship("Grade", lazy="selectin")
    harvest_links = relationship(
        "BatchHarvestRecord",
        back_populates="batch",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
