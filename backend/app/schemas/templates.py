"""Pydantic schemas for step, title and appreciation templates."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class StepTemplateIn(BaseModel):
    manual_craft: dict | None = None
    modern_craft: dict | None = None


class StepTemplateOut(BaseModel):
    id: str
    step_name: str
    manual_craft: Any = None
    modern_craft: Any = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TitleTemplatesIn(BaseModel):
    # [{"category_name": "...", "title_template": "..."}]; checked by the router
    templates: Any = None


class TitleTemplateOut(BaseModel):
    id: str
    category_name: str
    title_template: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AppreciationTemplateIn(BaseModel):
    tasting_notes: str | None = None
    brewing_suggestion: str | None = None
    storage_method: str | None = None


class AppreciationTemplateOut(BaseModel):
    id: str
    category_name: str
    tasting_notes: str | None
    brewing_suggestion: str | None
    storage_method: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
