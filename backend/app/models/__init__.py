"""Aggregate model imports for Alembic auto-detection."""

# Accounts
from app.models.user import User  # noqa: F401

# Reference data
from app.models.tea_category import TeaCategory  # noqa: F401
from app.models.plot import Plot  # noqa: F401
from app.models.personnel import Personnel, PersonnelRole  # noqa: F401
from app.models.grade import Grade  # noqa: F401

# Growth observation
from app.models.growth_log import DailyGrowthLog, FarmActivityType  # noqa: F401
from app.models.monthly_summary import MonthlySummary  # noqa: F401

# Harvest and production
from app.models.harvest_record import HarvestRecord  # noqa: F401
from app.models.batch import Batch, BatchStatus  # noqa: F401
from app.models.batch_harvest_record import BatchHarvestRecord  # noqa: F401

# Content
from app.models.adoption_plan import AdoptionPlan, AdoptionPlanType  # noqa: F401
from app.models.templates import (  # noqa: F401
    AppreciationTemplate,
    ProductionStepTemplate,
    TitleTemplate,
    WeatherTemplate,
)
from app.models.setting import Setting, SettingCategory, SettingDataType  # noqa: F401
