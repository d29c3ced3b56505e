"""Growth-log helpers: farm-activity parsing, status tags, harvest info.

Farm activities arrive from the admin UI as Chinese labels, optionally
prefixed with an emoji ("🌱 施肥"); older clients send the enum value
("FERTILIZE").  Both forms normalise to ``FarmActivityType``.
"""

import re
from collections import defaultdict
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.growth_log import DailyGrowthLog, FarmActivityType
from app.models.harvest_record import HarvestRecord
from app.schemas.growth_log import GrowthLogOut
from app.utils.dates import date_key, day_range

ACTIVITY_BY_LABEL = {
    "无": FarmActivityType.NONE,
    "施肥": FarmActivityType.FERTILIZE,
    "修剪": FarmActivityType.PRUNE,
    "灌溉": FarmActivityType.IRRIGATE,
    "采摘": FarmActivityType.HARVEST,
    "异常": FarmActivityType.ABNORMAL,
}
LABEL_BY_ACTIVITY = {activity: label for label, activity in ACTIVITY_BY_LABEL.items()}

# Calendar badge shown next to a day's log
STATUS_TAGS = {
    "施肥": {"priority": 3, "type": "info", "text": "施肥", "color": "#17a2b8"},
    "修剪": {"priority": 3, "type": "info", "text": "修剪", "color": "#6c757d"},
    "灌溉": {"priority": 2, "type": "info", "text": "灌溉", "color": "#007bff"},
    "采摘": {"priority": 5, "type": "success", "text": "采摘", "color": "#28a745"},
    "异常": {"priority": 10, "type": "danger", "text": "异常", "color": "#dc3545"},
}

_EMOJI_PREFIX = re.compile(r"^[\U0001F000-\U0001FAFF\u2600-\u27BF\uFE0F]+\s*")


def strip_activity_label(value) -> str:
    if value is None:
        return ""
    return _EMOJI_PREFIX.sub("", str(value)).strip()


def normalize_farm_activity_type(value) -> FarmActivityType:
    """Map a label or enum value to ``FarmActivityType``; unknown → NONE."""
    cleaned = strip_activity_label(value)
    if not cleaned:
        return FarmActivityType.NONE
    if cleaned in ACTIVITY_BY_LABEL:
        return ACTIVITY_BY_LABEL[cleaned]
    try:
        return FarmActivityType(cleaned)
    except ValueError:
        return FarmActivityType.NONE


def build_status_tag(value) -> dict | None:
    """Status tag for a farm activity.

    Known activities get their fixed badge, free text gets a low-priority
    grey badge, and 无 or an empty value yields None.
    """
    label = strip_activity_label(value)
    if label in FarmActivityType.__members__:
        label = LABEL_BY_ACTIVITY[FarmActivityType(label)]
    if not label or label == "无":
        return None
    if label in STATUS_TAGS:
        return dict(STATUS_TAGS[label])
    return {"priority": 1, "type": "info", "text": label, "color": "#6c757d"}


async def harvest_info_by_day(
    db: AsyncSession, logs: Iterable[DailyGrowthLog]
) -> dict[str, dict]:
    """Summarise harvest records on each log's calendar day.

    Returns ``{"YYYY-MM-DD": {has_harvest, count, total_weight_kg, categories}}``
    for every log date, including days with no harvest.
    """
    days = sorted({date_key(log.date) for log in logs if log.date is not None})
    if not days:
        return {}

    logs_by_day = {date_key(log.date): log.date for log in logs if log.date is not None}
    first, _ = day_range(logs_by_day[days[0]])
    _, last = day_range(logs_by_day[days[-1]])

    result = await db.execute(
        select(HarvestRecord.harvest_date, HarvestRecord.fresh_leaf_weight_kg, HarvestRecord.category_name)
        .where(HarvestRecord.harvest_date >= first, HarvestRecord.harvest_date <= last)
        .order_by(HarvestRecord.harvest_date.asc())
    )

    grouped = defaultdict(list)
    for harvest_date, weight, category_name in result.all():
        grouped[date_key(harvest_date)].append((float(weight or 0), category_name))

    info = {}
    for day in days:
        harvests = grouped.get(day, [])
        categories = []
        for _, category_name in harvests:
            if category_name and category_name not in categories:
                categories.append(category_name)
        info[day] = {
            "has_harvest": bool(harvests),
            "count": len(harvests),
            "total_weight_kg": sum(weight for weight, _ in harvests),
            "categories": categories,
        }
    return info


async def with_harvest_info(db: AsyncSession, logs: list[DailyGrowthLog]) -> list[GrowthLogOut]:
    """Serialise logs with the same day's harvest summary attached."""
    info = await harvest_info_by_day(db, logs)
    out = []
    for log in logs:
        item = GrowthLogOut.model_validate(log)
        item.harvest_info = info.get(date_key(log.date))
        out.append(item)
    return out
