"""Pydantic schemas for daily growth logs."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.models.growth_log import FarmActivityType
from app.schemas.common import PlotName, RecorderBrief
from app.schemas.validators import NaiveDatetime


class GrowthLogCreate(BaseModel):
    date: NaiveDatetime | None = None
    plot_id: str | None = None
    recorder_name: str | None = None
    main_image_url: str | None = None
    weather: dict | None = None
    summary: str | None = None
    detail_gallery: list | None = None
    photo_info: dict | None = None
    environment_data: dict | None = None
    full_log: str | None = None
    # Chinese label ("施肥", "🌱 施肥") or enum value ("FERTILIZE")
    farm_activity_type: str | None = None
    farm_activity_log: str | None = None
    phenological_observation: str | None = None
    abnormal_event: dict | None = None
    harvest_weight_kg: float | None = None


class GrowthLogUpdate(GrowthLogCreate):
    pass


class HarvestInfo(BaseModel):
    has_harvest: bool
    count: int
    total_weight_kg: float
    categories: list[str]


class GrowthLogOut(BaseModel):
    id: str
    date: datetime
    plot_id: str | None
    recorder_id: str | None
    recorder_name: str | None
    main_image_url: str | None
    status_tag: Any = None
    weather: Any = None
    summary: str | None
    detail_gallery: Any = None
    photo_info: Any = None
    environment_data: Any = None
    full_log: str | None
    farm_activity_type: FarmActivityType
    farm_activity_log: str | None
    phenological_observation: str | None
    abnormal_event: Any = None
    harvest_weight_kg: float | None
    plot: PlotName | None = None
    recorder: RecorderBrief | None = None
    harvest_info: HarvestInfo | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class WeatherOfDay(BaseModel):
    weather: dict


class MonthLogCount(BaseModel):
    month: str
    count: int
