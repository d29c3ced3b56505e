"""Batch defaults and reference resolution."""

import copy
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.batch import Batch
from app.models.grade import Grade
from app.models.personnel import PersonnelRole
from app.models.templates import PRODUCTION_STEPS
from app.services.personnel import find_personnel_by_name

logger = logging.getLogger(__name__)

CRAFT_TYPES = ("manual", "modern")
STEP_CRAFT_TYPES = ("manual", "modern", "none")
CRAFT_FIELDS = ("media_urls", "purpose", "method", "sensory_change", "value")


def _blank_craft() -> dict:
    return {"media_urls": [], "purpose": "", "method": "", "sensory_change": "", "value": ""}


def default_production_steps() -> list[dict]:
    """The five craft steps a new batch starts with."""
    return [
        {
            "step_name": name,
            "step_order": order,
            "manual_craft": _blank_craft(),
            "modern_craft": _blank_craft(),
            "description": "",
            "images": [],
        }
        for order, name in enumerate(PRODUCTION_STEPS, start=1)
    ]


def validate_production_steps(steps) -> str | None:
    """Return an error message for a malformed step list, else None."""
    if not isinstance(steps, list):
        return "production_steps must be an array"
    for index, step in enumerate(steps, start=1):
        if not isinstance(step, dict) or not step.get("step_name") or step.get("step_order") is None:
            return f"Step {index} is missing step_name or step_order"
        craft_type = step.get("craft_type")
        if craft_type and craft_type not in STEP_CRAFT_TYPES:
            return f"Step {index} has an invalid craft_type; expected manual, modern or none"
    return None


def apply_step_craft(steps: list, step_index: int, craft_type: str, values: dict) -> list:
    """Return a copy of ``steps`` with one step's craft fields replaced.

    Only keys present in ``values`` are written.  The copy is what gets
    assigned back to ``Batch.production_steps`` so the JSON change is
    flushed.
    """
    updated = copy.deepcopy(steps)
    step = updated[step_index]
    key = f"{craft_type}_craft"
    craft = step.get(key) or {}
    for field in CRAFT_FIELDS:
        if field in values:
            craft[field] = values[field]
    step[key] = craft
    return updated


async def resolve_tea_master_id(db: AsyncSession, tea_master: dict | None) -> str | None:
    name = (tea_master or {}).get("name")
    person = await find_personnel_by_name(db, name, PersonnelRole.TEA_MASTER)
    return person.id if person else None


async def resolve_grade_id(db: AsyncSession, grade_name: str | None) -> str | None:
    grade_name = (grade_name or "").strip()
    if not grade_name:
        return None
    grade = await db.scalar(select(Grade).where(Grade.name == grade_name))
    if grade is None:
        logger.warning(f"No grade named {grade_name!r}; grade_id left empty")
        return None
    return grade.id


async def reload_batch(db: AsyncSession, batch_id: str) -> Batch | None:
    """Re-select a batch so its eager-loaded links reflect pending writes."""
    result = await db.execute(
        select(Batch)
        .where(Batch.id == batch_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
