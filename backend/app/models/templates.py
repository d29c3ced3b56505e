"""Reusable content templates for batches and growth logs.

- ProductionStepTemplate: default manual/modern craft text per step
- TitleTemplate: batch detail-page title per tea category
- AppreciationTemplate: default tasting/brewing/storage copy per category
- WeatherTemplate: weather choices (icon + temperature range) for daily logs
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# Canonical production order; also the only allowed step names
PRODUCTION_STEPS = ["摊晾", "杀青", "揉捻", "干燥", "分拣"]


class ProductionStepTemplate(Base):
    __tablename__ = "production_step_templates"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    step_name: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    # {"purpose": "", "method": "", "sensory_change": "", "value": ""}
    manual_craft: Mapped[dict | None] = mapped_column(JSON)
    modern_craft: Mapped[dict | None] = mapped_column(JSON)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class TitleTemplate(Base):
    __tablename__ = "title_templates"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    category_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    title_template: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class AppreciationTemplate(Base):
    __tablename__ = "appreciation_templates"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    category_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    tasting_notes: Mapped[str | None] = mapped_column(Text, default="")
    brewing_suggestion: Mapped[str | None] = mapped_column(Text, default="")
    storage_method: Mapped[str | None] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class WeatherTemplate(Base):
    __tablename__ = "weather_templates"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    # Either inline SVG markup or an /uploads/weather/... URL
    svg_icon: Mapped[str] = mapped_column(Text, default="")
    temperature_range: Mapped[str | None] = mapped_column(String(50))
    description: Mapped[str | None] = mapped_column(Text)
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
