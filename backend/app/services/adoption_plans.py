"""Adoption-plan defaults and lookup.

The admin UI and the public site address plans by lowercase type
(``private`` / ``enterprise`` / ``b2b``).  A missing plan is created with
blank content on first read so the editors always have something to fill.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.adoption_plan import AdoptionPlan, AdoptionPlanType

logger = logging.getLogger(__name__)

PLAN_TYPES = {
    "private": AdoptionPlanType.PRIVATE,
    "enterprise": AdoptionPlanType.ENTERPRISE,
    "b2b": AdoptionPlanType.B2B,
}

# Fields each plan type may update
PLAN_FIELDS = {
    AdoptionPlanType.PRIVATE: (
        "marketing_header",
        "value_propositions",
        "customer_cases",
        "scenario_applications",
        "packages",
        "process_steps",
        "comparison_package_names",
        "comparison_features",
    ),
    AdoptionPlanType.ENTERPRISE: (
        "marketing_header",
        "customer_cases",
        "use_scenarios",
        "service_contents",
        "process_steps",
    ),
    AdoptionPlanType.B2B: ("description",),
}


def default_plan_data(plan_type: AdoptionPlanType) -> dict:
    if plan_type == AdoptionPlanType.B2B:
        return {"description": ""}
    data = {
        field: []
        for field in PLAN_FIELDS[plan_type]
        if field != "marketing_header"
    }
    data["marketing_header"] = {"title": "", "subtitle": "", "description": ""}
    return data


async def get_plan(db: AsyncSession, plan_type: AdoptionPlanType) -> AdoptionPlan | None:
    result = await db.execute(select(AdoptionPlan).where(AdoptionPlan.type == plan_type))
    return result.scalar_one_or_none()


async def get_or_create_plan(db: AsyncSession, plan_type: AdoptionPlanType) -> AdoptionPlan:
    plan = await get_plan(db, plan_type)
    if plan is None:
        plan = AdoptionPlan(type=plan_type, **default_plan_data(plan_type))
        db.add(plan)
        await db.flush()
        logger.info(f"Created default {plan_type.value} adoption plan")
    return plan


async def upsert_plan(
    db: AsyncSession, plan_type: AdoptionPlanType, values: dict
) -> AdoptionPlan:
    plan = await get_plan(db, plan_type)
    if plan is None:
        plan = AdoptionPlan(type=plan_type, **{**default_plan_data(plan_type), **values})
        db.add(plan)
    else:
        for field, value in values.items():
            setattr(plan, field, value)
    await db.flush()
    return plan
