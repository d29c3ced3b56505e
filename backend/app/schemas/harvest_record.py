"""Pydantic schemas for harvest records."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.common import CategoryBrief, PersonnelBrief
from app.schemas.validators import NaiveDatetime


class HarvestRecordCreate(BaseModel):
    harvest_date: NaiveDatetime | None = None
    fresh_leaf_weight_kg: float | None = None
    weather: dict | None = None
    images_and_videos: list | None = None
    media_urls: list | None = None
    # {"leader_name": "...", "member_count": 6}; member_count is checked by the router
    harvest_team: dict | None = None
    notes: str | None = None


class HarvestRecordUpdate(HarvestRecordCreate):
    pass


class HarvestRecordOut(BaseModel):
    id: str
    harvest_date: datetime
    fresh_leaf_weight_kg: float | None
    weather: Any = None
    images_and_videos: Any = None
    media_urls: Any = None
    harvest_team: Any = None
    harvest_team_id: str | None
    category_id: str | None
    category_name: str | None
    assigned_batch_id: str | None
    notes: str | None
    harvest_leader: PersonnelBrief | None = None
    category: CategoryBrief | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssignedBatchBrief(BaseModel):
    id: str
    batch_number: str
    category_name: str

    model_config = {"from_attributes": True}


class HarvestRecordDetailOut(HarvestRecordOut):
    assigned_batch: AssignedBatchBrief | None = None


class WeatherSyncDetail(BaseModel):
    date: str
    status: str
    weather: dict | None = None
    message: str | None = None
    error: str | None = None


class WeatherSyncResult(BaseModel):
    total: int
    synced: int
    no_data: int = Field(alias="noData")
    errors: int
    details: list[WeatherSyncDetail]

    model_config = {"populate_by_name": True}
