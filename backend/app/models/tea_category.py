"""Tea categories: the product lines a harvest is sorted into.

A category's picking window (``picking_start_date`` .. ``picking_end_date``)
is compared by month/day only, so the stored year is irrelevant; see
``app.services.classification``.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class TeaCategory(Base):
    __tablename__ = "tea_categories"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # Pinyin slug used by the public site: 明前茶 → mingqiancha
    slug: Mapped[str] = mapped_column(String(150), unique=True, nullable=False, index=True)
    image_url: Mapped[str | None] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(Text)
    yield_percentage: Mapped[float] = mapped_column(Float, default=0.0)

    # Free-text picking window as entered, e.g. "8.4-9.30"
    picking_period: Mapped[str | None] = mapped_column(String(50))
    picking_start_date: Mapped[datetime | None] = mapped_column(DateTime)
    picking_end_date: Mapped[datetime | None] = mapped_column(DateTime)

    sort_order: Mapped[int] = mapped_column(Integer, default=999)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
