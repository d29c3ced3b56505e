"""Harvest-date → tea-category classification.

A category's picking window is stored as two datetimes, but only their
month and day matter: the window is re-anchored to the harvest's own year
before comparing, so a category entered as "4.5-5.20" matches every year.

Categories are tried in ``sort_order ASC, created_at ASC`` order and the
first one whose window contains the harvest date wins.
"""

import calendar
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.harvest_record import HarvestRecord
from app.models.tea_category import TeaCategory

logger = logging.getLogger(__name__)


def _anchor(year: int, month: int, day: int, end_of_day: bool = False) -> datetime:
    # Feb 29 in a non-leap year clamps to Feb 28
    day = min(day, calendar.monthrange(year, month)[1])
    if end_of_day:
        return datetime(year, month, day, 23, 59, 59, 999000)
    return datetime(year, month, day)


def find_category_for_date(
    harvest_date: datetime, categories: Iterable[TeaCategory]
) -> tuple[Optional[str], Optional[str]]:
    """Return ``(category_id, category_name)`` for the first matching category.

    Categories missing either picking date are skipped.  Returns
    ``(None, None)`` when nothing matches.
    """
    day = datetime(harvest_date.year, harvest_date.month, harvest_date.day)

    for category in categories:
        start, end = category.picking_start_date, category.picking_end_date
        if start is None or end is None:
            continue
        window_start = _anchor(day.year, start.month, start.day)
        window_end = _anchor(day.year, end.month, end.day, end_of_day=True)
        if window_start <= day <= window_end:
            return category.id, category.name

    return None, None


async def load_categories_for_classification(db: AsyncSession) -> list[TeaCategory]:
    result = await db.execute(
        select(TeaCategory).order_by(
            TeaCategory.sort_order.asc(), TeaCategory.created_at.asc()
        )
    )
    return list(result.scalars().all())


async def classify_harvest_date(
    db: AsyncSession, harvest_date: datetime
) -> tuple[Optional[str], Optional[str]]:
    categories = await load_categories_for_classification(db)
    category_id, category_name = find_category_for_date(harvest_date, categories)
    if category_id is None:
        logger.warning(f"No tea category covers harvest date {harvest_date.date()}")
    return category_id, category_name


async def reclassify_all_harvest_records(db: AsyncSession) -> int:
    """Re-run classification over every harvest record.

    Only records whose category id or name actually changes are written.
    Returns the number of records changed.
    """
    categories = await load_categories_for_classification(db)
    result = await db.execute(select(HarvestRecord))

    changed = 0
    for record in result.scalars().all():
        if record.harvest_date is None:
            continue
        category_id, category_name = find_category_for_date(
            record.harvest_date, categories
        )
        if record.category_id != category_id or record.category_name != category_name:
            record.category_id = category_id
            record.category_name = category_name
            changed += 1

    await db.flush()
    logger.info(f"Reclassified {changed} harvest record(s)")
    return changed


def parse_picking_period(
    period: str, year: Optional[int] = None
) -> Optional[tuple[datetime, datetime]]:
    """Parse ``"M.D-M.D"`` into a (start, end) pair in ``year``.

    Start is 00:00:00 of the first day, end is 23:59:59.999 of the last.
    Returns None for anything malformed or out of range.

    >>> parse_picking_period("8.4-9.30", 2024)[0]
    datetime.datetime(2024, 8, 4, 0, 0)
    """
    if not period or not isinstance(period, str):
        return None
    year = year or datetime.now().year

    parts = period.split("-")
    if len(parts) != 2:
        return None
    start_parts = parts[0].strip().split(".")
    end_parts = parts[1].strip().split(".")
    if len(start_parts) != 2 or len(end_parts) != 2:
        return None

    try:
        start_month, start_day = int(start_parts[0]), int(start_parts[1])
        end_month, end_day = int(end_parts[0]), int(end_parts[1])
    except ValueError:
        return None

    if not (1 <= start_month <= 12 and 1 <= end_month <= 12):
        return None
    if not (1 <= start_day <= 31 and 1 <= end_day <= 31):
        return None

    return (
        _anchor(year, start_month, start_day),
        _anchor(year, end_month, end_day, end_of_day=True),
    )
