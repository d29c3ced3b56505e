"""Pydantic schemas for the landing page: plots, settings and footer."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, computed_field, field_validator

from app.models.setting import SettingCategory, SettingDataType
from app.schemas.category import CategoryOut


# ── Plots ────────────────────────────────────────────────────

class PlotCreate(BaseModel):
    name: str | None = None
    carousel_images: list | None = None
    info_list: list | None = None


class PlotImageRequest(BaseModel):
    image_url: str | None = None


class PlotInfoUpdate(BaseModel):
    info_list: Any = None


class PlotCarouselUpdate(BaseModel):
    carousel_images: Any = None


class PlotOut(BaseModel):
    id: str
    name: str
    carousel_images: list = []
    info_list: list = []
    # Kept for older admin pages that expect the key
    categories: list = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_validator("carousel_images", "info_list", mode="before")
    @classmethod
    def _as_list(cls, value):
        return value if isinstance(value, list) else []

    @computed_field(alias="_id")
    @property
    def legacy_id(self) -> str:
        return self.id


# ── Settings ─────────────────────────────────────────────────

class SettingOut(BaseModel):
    id: str
    key: str
    value: str | None
    description: str | None
    category: SettingCategory
    data_type: SettingDataType
    is_public: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CtaBackgroundRequest(BaseModel):
    value: str | None = None
    description: str | None = None


class CtaBackgroundOut(BaseModel):
    key: str
    value: str
    description: str | None = ""


class FooterSettingsIn(BaseModel):
    logo_url: str | None = None
    garden_name: str | None = None
    copyright_text: str | None = None
    # Checked by the router: a list of {"platform", "url"}
    social_links: Any = None


class FooterSettings(BaseModel):
    logo_url: str = ""
    garden_name: str = ""
    copyright_text: str = ""
    social_links: list = []


class LandingPageOut(BaseModel):
    plot: PlotOut | None = None
    categories: list[CategoryOut] = []
    cta_bg: str | None = None
    footer: FooterSettings
