"""Response shapes for the unauthenticated ``/api/public`` endpoints."""

from pydantic import BaseModel, Field

from app.schemas.growth_log import GrowthLogOut
from app.schemas.management import AdoptionPlanOut, WeatherTemplateOut
from app.schemas.summary import MonthlySummaryOut


class GrowthDataOut(BaseModel):
    month: str
    daily_logs: list[GrowthLogOut] = Field(alias="dailyLogs")
    monthly_summary: MonthlySummaryOut | None = Field(None, alias="monthlySummary")
    daily_logs_count: int = Field(alias="dailyLogsCount")
    has_monthly_summary: bool = Field(alias="hasMonthlySummary")

    model_config = {"populate_by_name": True}


class PublicMonthlySummaryOut(BaseModel):
    month: str
    summary: MonthlySummaryOut | None = None
    has_summary: bool = Field(alias="hasSummary")

    model_config = {"populate_by_name": True}


class PublicWeatherTemplates(BaseModel):
    templates: list[WeatherTemplateOut]
    # {name: svg_icon}
    icon_map: dict[str, str] = Field(alias="iconMap")

    model_config = {"populate_by_name": True}


class PublicAdoptionPlans(BaseModel):
    private: AdoptionPlanOut
    enterprise: AdoptionPlanOut
    b2b: AdoptionPlanOut
