"""Pydantic schemas for production batches."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, computed_field, model_validator

from app.models.batch import Batch, BatchStatus
from app.schemas.category import CategoryMeta
from app.schemas.common import GradeBrief, PersonnelBrief
from app.schemas.harvest_record import HarvestRecordOut
from app.schemas.validators import NaiveDatetime


# ── Create / update ──────────────────────────────────────────

class BatchCreate(BaseModel):
    batch_number: str | None = None
    category_name: str | None = None
    # Snapshot as entered: {"name": "...", "avatar_url": "..."}
    tea_master: dict | None = None
    production_steps: list | None = None
    tasting_report: dict | None = None
    product_appreciation: dict | None = None
    final_product_weight_kg: float | None = None
    grade: str | None = None
    production_date: NaiveDatetime | None = None
    status: BatchStatus | None = None
    cover_image_url: str | None = None
    detail_cover_image_url: str | None = None
    images_and_videos: list | None = None
    notes: str | None = None
    detail_title: str | None = None
    harvest_records_ids: list[str] | None = None


class BatchUpdate(BaseModel):
    batch_number: str | None = None
    category_name: str | None = None
    tea_master: dict | None = None
    tasting_report: dict | None = None
    product_appreciation: dict | None = None
    final_product_weight_kg: float | None = None
    grade: str | None = None
    production_date: NaiveDatetime | None = None
    status: BatchStatus | None = None
    cover_image_url: str | None = None
    detail_cover_image_url: str | None = None
    images_and_videos: list | None = None
    notes: str | None = None
    detail_title: str | None = None


class ProductionStepsUpdate(BaseModel):
    # Validated by the router so a non-list body is a 400, not a 422
    production_steps: Any = None


class StepCraftUpdate(BaseModel):
    media_urls: Any = None
    purpose: str | None = None
    method: str | None = None
    sensory_change: str | None = None
    value: str | None = None


# ── Output ───────────────────────────────────────────────────

def _personnel_dict(person) -> dict | None:
    if person is None:
        return None
    return {
        "id": person.id,
        "name": person.name,
        "avatar_url": person.avatar_url,
        "role": person.role.value,
        "experience_years": person.experience_years,
    }


def _column_values(batch: Batch) -> dict:
    return {column.key: getattr(batch, column.key) for column in Batch.__table__.columns}


def _linked_records(batch: Batch) -> list:
    return [link.harvest_record for link in batch.harvest_links if link.harvest_record is not None]


class _BatchFields(BaseModel):
    id: str
    batch_number: str
    category_name: str
    tea_master_id: str | None = None
    production_steps: Any = None
    tasting_report: Any = None
    product_appreciation: Any = None
    final_product_weight_kg: float | None = None
    grade_id: str | None = None
    production_date: datetime | None = None
    status: BatchStatus
    cover_image_url: str | None = None
    detail_cover_image_url: str | None = None
    images_and_videos: Any = None
    notes: str | None = None
    detail_title: str | None = None
    harvest_records: list[HarvestRecordOut] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @computed_field(alias="_id")
    @property
    def legacy_id(self) -> str:
        return self.id


class BatchOut(_BatchFields):
    """Admin view of a batch.

    ``tea_master`` prefers the linked personnel record over the stored
    snapshot; ``grade_ref`` falls back to ``{"name": grade}`` when the grade
    text has no matching Grade row.
    """
    tea_master: dict | None = None
    grade: str | None = None
    grade_name: str | None = None
    grade_ref: GradeBrief | None = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_relations(cls, data):
        if not isinstance(data, Batch):
            return data
        values = _column_values(data)
        grade_name = data.grade_ref.name if data.grade_ref else data.grade
        values["tea_master"] = _personnel_dict(data.tea_master_ref) or data.tea_master
        values["grade"] = grade_name
        values["grade_name"] = grade_name
        if data.grade_ref is not None:
            values["grade_ref"] = data.grade_ref
        elif data.grade:
            values["grade_ref"] = {"name": data.grade}
        values["harvest_records"] = _linked_records(data)
        return values


class BatchLinkOut(BaseModel):
    batch_id: str
    harvest_record_id: str
    notes: str | None = None
    created_at: datetime
    harvest_record: HarvestRecordOut | None = None

    model_config = {"from_attributes": True}


class PublicBatchOut(_BatchFields):
    """Traceability page view: master and grade as linked objects only."""
    tea_master: PersonnelBrief | None = None
    grade: GradeBrief | None = None

    @model_validator(mode="before")
    @classmethod
    def _resolve_relations(cls, data):
        if not isinstance(data, Batch):
            return data
        values = _column_values(data)
        values["tea_master"] = data.tea_master_ref
        values["grade"] = data.grade_ref
        values["harvest_records"] = _linked_records(data)
        values["batch_links"] = list(data.harvest_links)
        return values


class PublicBatchDetailOut(PublicBatchOut):
    batch_links: list[BatchLinkOut] = Field([], alias="batchLinks")

    model_config = {"from_attributes": True, "populate_by_name": True}


class PublicBatchList(BaseModel):
    data: list[PublicBatchOut]
    count: int
    category: CategoryMeta | None = None
