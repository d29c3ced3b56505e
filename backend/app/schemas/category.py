"""Pydantic schemas for tea categories."""

from datetime import datetime

from pydantic import BaseModel

from app.schemas.validators import NaiveDatetime


class CategoryCreate(BaseModel):
    name: str | None = None
    image_url: str | None = None
    description: str | None = None
    yield_percentage: float | None = None
    # "M.D-M.D"; parsed into picking dates when those are not given
    picking_period: str | None = None
    picking_start_date: NaiveDatetime | None = None
    picking_end_date: NaiveDatetime | None = None
    sort_order: int | None = None


class CategoryUpdate(CategoryCreate):
    pass


class CategoryOut(BaseModel):
    id: str
    name: str
    slug: str
    image_url: str | None
    description: str | None
    yield_percentage: float | None
    picking_period: str | None
    picking_start_date: datetime | None
    picking_end_date: datetime | None
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CategoryMeta(BaseModel):
    id: str
    name: str
    slug: str
    description: str | None = None
    image_url: str | None = None

    model_config = {"from_attributes": True}


class PublicCategoryCount(BaseModel):
    name: str
    slug: str
    count: int
