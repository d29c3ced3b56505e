"""Pydantic schemas for grades, personnel, weather templates and adoption plans."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from app.models.adoption_plan import AdoptionPlanType
from app.models.personnel import PersonnelRole


# ── Grades ───────────────────────────────────────────────────

class GradeIn(BaseModel):
    name: str | None = None
    badge_url: str | None = None


class GradeOut(BaseModel):
    id: str
    name: str
    badge_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Personnel ────────────────────────────────────────────────

class PersonnelIn(BaseModel):
    name: str | None = None
    # 记录人 / 采摘队长 / 制茶师, or the enum value
    role: str | None = None
    avatar_url: str | None = None
    experience_years: float | None = None


class PersonnelOut(BaseModel):
    id: str
    name: str
    role: PersonnelRole
    avatar_url: str | None
    experience_years: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Weather templates ────────────────────────────────────────

class WeatherTemplateIn(BaseModel):
    name: str | None = None
    svg_icon: str | None = None
    temperature_range: str | None = None
    description: str | None = None
    sort_order: int | None = None
    is_active: bool | None = None


class WeatherTemplateOut(BaseModel):
    id: str
    name: str
    svg_icon: str | None
    temperature_range: str | None
    description: str | None
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


# ── Adoption plans ───────────────────────────────────────────

class AdoptionPlanIn(BaseModel):
    """Every updatable field across plan types; the router keeps only the
    ones that belong to the addressed type."""
    marketing_header: dict | None = None
    value_propositions: list | None = None
    customer_cases: list | None = None
    scenario_applications: list | None = None
    packages: list | None = None
    comparison_package_names: list | None = None
    comparison_features: list | None = None
    process_steps: list | None = None
    use_scenarios: list | None = None
    service_contents: list | None = None
    description: str | None = None


class AdoptionPlanOut(BaseModel):
    id: str
    type: AdoptionPlanType
    marketing_header: Any = None
    value_propositions: Any = None
    customer_cases: Any = None
    scenario_applications: Any = None
    packages: Any = None
    comparison_package_names: Any = None
    comparison_features: Any = None
    process_steps: Any = None
    use_scenarios: Any = None
    service_contents: Any = None
    description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
