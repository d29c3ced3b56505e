"""Monthly summary generation.

Rolls one month of daily growth logs and harvest records up into a single
``MonthlySummary`` row (upserted by ``year_month``):

  harvest_stats     {count, total_weight} over the month's harvest records
  farm_calendar     one "4月5日 施肥" line per farm activity and per harvest
  abnormal_summary  [{date, issue, measures}] for logs with an abnormal event
  climate_summary   {avg_temp, total_precipitation} from environment data

Generation only reads the source rows, so running it twice over unchanged
data produces the same aggregate.
"""

import logging
import re

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.middleware.exceptions import BusinessLogicError
from app.models.growth_log import DailyGrowthLog, FarmActivityType
from app.models.harvest_record import HarvestRecord
from app.models.monthly_summary import MonthlySummary
from app.utils.dates import month_day_label, month_range, slash_date

logger = logging.getLogger(__name__)

ACTIVITY_LABELS = {
    FarmActivityType.FERTILIZE: "施肥",
    FarmActivityType.PRUNE: "修剪",
    FarmActivityType.IRRIGATE: "灌溉",
    FarmActivityType.HARVEST: "采摘",
    FarmActivityType.ABNORMAL: "异常",
}

NO_PRECIPITATION = "无降水记录"

_NON_NUMERIC = re.compile(r"[^\d.-]")
_LEADING_NUMBER = re.compile(r"^-?(\d+\.?\d*|\.\d+)")


def parse_measurement(value) -> float:
    """Numeric part of a reading such as ``"3.5mm"``; 0 when unparsable."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", value))
        if match:
            return float(match.group(0))
    return 0.0


def build_farm_calendar(
    logs: list[DailyGrowthLog], harvests: list[HarvestRecord]
) -> str:
    entries = []
    for log in logs:
        if log.farm_activity_type and log.farm_activity_type != FarmActivityType.NONE:
            label = ACTIVITY_LABELS.get(log.farm_activity_type, log.farm_activity_type.value)
            entries.append((log.date, f"{month_day_label(log.date)} {label}"))
    for record in harvests:
        entries.append(
            (record.harvest_date, f"{month_day_label(record.harvest_date)} 采摘")
        )

    # sorted() is stable: a log's activity stays ahead of a harvest on the same day
    entries = sorted(entries, key=lambda entry: entry[0])
    return "\n".join(text for _, text in entries)


def build_abnormal_summary(logs: list[DailyGrowthLog]) -> list[dict]:
    summary = []
    for log in logs:
        event = log.abnormal_event or {}
        if not isinstance(event, dict) or not str(event.get("title") or "").strip():
            continue
        summary.append({
            "date": slash_date(log.date),
            "issue": event.get("title") or "",
            "measures": event.get("measures_taken") or "",
        })
    return summary


def build_climate_summary(logs: list[DailyGrowthLog]) -> dict:
    environments = [
        log.environment_data for log in logs if isinstance(log.environment_data, dict)
    ]

    temps = [env["temperature"] for env in environments if env.get("temperature")]
    avg_temp = f"{temps[0]}~{temps[-1]}" if temps else ""

    rainfalls = [
        env["rainfall"]
        for env in environments
        if env.get("rainfall") is not None and env.get("rainfall") != ""
    ]
    if rainfalls:
        total = sum(parse_measurement(value) for value in rainfalls)
        total_precipitation = f"{total:.1f}mm"
    else:
        total_precipitation = NO_PRECIPITATION

    return {"avg_temp": avg_temp, "total_precipitation": total_precipitation}


async def generate_monthly_summary(db: AsyncSession, month: str) -> MonthlySummary:
    """Build (or rebuild) the summary for ``month`` (``YYYY-MM``).

    Raises:
        BusinessLogicError: the month is malformed or has no daily logs.
    """
    try:
        start, end = month_range(month)
    except ValueError:
        raise BusinessLogicError("Month must be in YYYY-MM format", error_code="INVALID_MONTH")

    logs = list((await db.execute(
        select(DailyGrowthLog)
        .where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
        .order_by(DailyGrowthLog.date.asc())
    )).scalars().all())

    if not logs:
        raise BusinessLogicError(
            f"No daily logs for {month}; cannot generate a summary",
            error_code="NO_DAILY_LOGS",
        )

    harvests = list((await db.execute(
        select(HarvestRecord)
        .where(HarvestRecord.harvest_date >= start, HarvestRecord.harvest_date <= end)
        .order_by(HarvestRecord.harvest_date.asc())
    )).scalars().all())

    harvest_stats = {
        "count": len(harvests),
        "total_weight": sum(float(r.fresh_leaf_weight_kg or 0) for r in harvests),
    }
    values = {
        "plot_id": logs[0].plot_id,
        "detail_gallery": [],
        "harvest_stats": harvest_stats,
        "farm_calendar": build_farm_calendar(logs, harvests),
        "abnormal_summary": build_abnormal_summary(logs),
        "climate_summary": build_climate_summary(logs),
        "next_month_plan": [],
    }

    summary = (await db.execute(
        select(MonthlySummary).where(MonthlySummary.year_month == month)
    )).scalar_one_or_none()
    if summary is None:
        summary = MonthlySummary(year_month=month, **values)
        db.add(summary)
    else:
        for field, value in values.items():
            setattr(summary, field, value)
    await db.flush()

    logger.info(
        f"Generated monthly summary {month}: {harvest_stats['count']} harvest(s), "
        f"{harvest_stats['total_weight']}kg, "
        f"{len(values['abnormal_summary'])} abnormal event(s)"
    )

    return (await db.execute(
        select(MonthlySummary)
        .where(MonthlySummary.id == summary.id)
        .execution_options(populate_existing=True)
    )).scalar_one()
