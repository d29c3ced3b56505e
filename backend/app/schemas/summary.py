"""Pydantic schemas for monthly summaries."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.schemas.common import PlotName


class MonthlySummaryCreate(BaseModel):
    year_month: str | None = None
    plot_id: str | None = None
    detail_gallery: list | None = None
    harvest_stats: dict | None = None
    farm_calendar: str | None = None
    abnormal_summary: list | None = None
    climate_summary: dict | None = None
    next_month_plan: list | None = None


class MonthlySummaryUpdate(MonthlySummaryCreate):
    pass


class GenerateSummaryRequest(BaseModel):
    month: str | None = None


class MonthlySummaryOut(BaseModel):
    id: str
    year_month: str
    plot_id: str | None
    detail_gallery: Any = None
    harvest_stats: Any = None
    farm_calendar: str | None
    abnormal_summary: Any = None
    climate_summary: Any = None
    next_month_plan: Any = None
    plot: PlotName | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
