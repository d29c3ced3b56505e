"""Personnel role parsing and by-name lookup.

Names typed into growth logs, harvest records and batches are linked to a
Personnel row of the expected role when one exists; the typed text is kept
either way.
"""

import logging
import math

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.personnel import Personnel, PersonnelRole

logger = logging.getLogger(__name__)

ROLE_MAP = {
    "记录人": PersonnelRole.RECORDER,
    "采摘队长": PersonnelRole.HARVEST_LEAD,
    "制茶师": PersonnelRole.TEA_MASTER,
    "RECORDER": PersonnelRole.RECORDER,
    "HARVEST_LEAD": PersonnelRole.HARVEST_LEAD,
    "TEA_MASTER": PersonnelRole.TEA_MASTER,
}

# ?role= filter additionally accepts lowercase enum names
ROLE_FILTER_MAP = {
    **ROLE_MAP,
    "recorder": PersonnelRole.RECORDER,
    "harvest_lead": PersonnelRole.HARVEST_LEAD,
    "tea_master": PersonnelRole.TEA_MASTER,
}


def clamp_experience(value) -> int:
    """Round half up to whole years and clamp to 0..100; junk counts as 0."""
    try:
        years = float(value or 0)
    except (TypeError, ValueError):
        return 0
    if math.isnan(years):
        return 0
    years = min(max(years, -100.0), 100.0)
    return min(max(math.floor(years + 0.5), 0), 100)


async def find_personnel_by_name(
    db: AsyncSession, name: str | None, role: PersonnelRole
) -> Personnel | None:
    """First personnel named ``name`` (trimmed) holding ``role``, else None."""
    name = (name or "").strip()
    if not name:
        return None
    result = await db.execute(
        select(Personnel)
        .where(Personnel.name == name, Personnel.role == role)
        .order_by(Personnel.created_at.asc())
        .limit(1)
    )
    person = result.scalar_one_or_none()
    if person is None:
        logger.warning(f"No {role.value} named {name!r}; link left empty")
    return person
