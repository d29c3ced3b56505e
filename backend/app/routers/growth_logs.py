"""Daily growth log router.

Endpoints:
    GET    /api/growth-logs/existing-dates   Dates that already have a log
    GET    /api/growth-logs/by-date          Weather of a given day's log
    GET    /api/growth-logs/count            Number of logs in a month
    GET    /api/growth-logs                  List logs (?month=YYYY-MM, else last 30 days)
    GET    /api/growth-logs/{log_id}         Single log
    POST   /api/growth-logs                  Create the day's log
    PUT    /api/growth-logs/{log_id}         Partial update
    DELETE /api/growth-logs/{log_id}         Delete log
"""

import logging
from datetime import datetime, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.middleware.exceptions import ConflictError
from app.models.growth_log import DailyGrowthLog
from app.models.personnel import PersonnelRole
from app.schemas.growth_log import (
    GrowthLogCreate,
    GrowthLogOut,
    GrowthLogUpdate,
    MonthLogCount,
    WeatherOfDay,
)
from app.services.growth_logs import (
    build_status_tag,
    normalize_farm_activity_type,
    with_harvest_info,
)
from app.services.personnel import find_personnel_by_name
from app.utils.dates import MONTH_RE, date_key, day_range, month_range, parse_datetime

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

RECENT_DAYS = 30
RECENT_LIMIT = 100

# Optional fields copied as-is, with empty values stored as NULL
_PLAIN_FIELDS = (
    "plot_id",
    "main_image_url",
    "weather",
    "summary",
    "detail_gallery",
    "photo_info",
    "environment_data",
    "full_log",
    "farm_activity_log",
    "phenological_observation",
    "abnormal_event",
)


async def _get_log(db: AsyncSession, log_id: str) -> DailyGrowthLog:
    log = await db.get(DailyGrowthLog, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Growth log not found")
    return log


async def _reload(db: AsyncSession, log_id: str) -> DailyGrowthLog:
    result = await db.execute(
        select(DailyGrowthLog)
        .where(DailyGrowthLog.id == log_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


# ── Lookups ──────────────────────────────────────────────────

@router.get("/existing-dates", response_model=list[str])
async def list_existing_dates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(DailyGrowthLog.date).order_by(DailyGrowthLog.date.asc()))
    return list(dict.fromkeys(date_key(value) for value in result.scalars().all()))


@router.get("/by-date", response_model=WeatherOfDay | None)
async def get_weather_by_date(
    date: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    day = parse_datetime(date)
    if day is None:
        raise HTTPException(status_code=400, detail="A valid date parameter is required")

    start, end = day_range(day)
    log = await db.scalar(
        select(DailyGrowthLog)
        .where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
        .limit(1)
    )
    if log is None:
        return None
    return WeatherOfDay(weather=log.weather or {"icon": "", "temperature_range": ""})


@router.get("/count", response_model=MonthLogCount)
async def count_logs(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    try:
        start, end = month_range(month)
    except ValueError:
        raise HTTPException(status_code=400, detail="month must be YYYY-MM")

    count = await db.scalar(
        select(func.count())
        .select_from(DailyGrowthLog)
        .where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
    )
    return MonthLogCount(month=month, count=count or 0)


# ── List / detail ────────────────────────────────────────────

@router.get("", response_model=list[GrowthLogOut])
async def list_growth_logs(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(DailyGrowthLog).order_by(DailyGrowthLog.date.desc())
    if month and MONTH_RE.match(month):
        try:
            start, end = month_range(month)
        except ValueError:
            raise HTTPException(status_code=400, detail="month must be YYYY-MM")
        stmt = stmt.where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
    else:
        since = datetime.utcnow() - timedelta(days=RECENT_DAYS)
        stmt = stmt.where(DailyGrowthLog.date >= since).limit(RECENT_LIMIT)

    logs = list((await db.execute(stmt)).scalars().all())
    return await with_harvest_info(db, logs)


@router.get("/{log_id}", response_model=GrowthLogOut)
async def get_growth_log(log_id: str, db: AsyncSession = Depends(get_db)):
    log = await _get_log(db, log_id)
    return (await with_harvest_info(db, [log]))[0]


# ── Create ───────────────────────────────────────────────────

@router.post("", response_model=GrowthLogOut, status_code=status.HTTP_201_CREATED)
async def create_growth_log(body: GrowthLogCreate, db: AsyncSession = Depends(get_db)):
    """Create the log for a calendar day; a second log on the same day is a 409."""
    if body.date is None:
        raise HTTPException(status_code=400, detail="date is required")

    start, end = day_range(body.date)
    existing = await db.scalar(
        select(DailyGrowthLog)
        .where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
        .limit(1)
    )
    if existing:
        raise ConflictError(
            f"A growth log already exists for {date_key(body.date)}",
            error_code="DUPLICATE_GROWTH_LOG",
            details={"existingLogId": existing.id},
        )

    recorder = await find_personnel_by_name(db, body.recorder_name, PersonnelRole.RECORDER)

    log = DailyGrowthLog(
        date=body.date,
        recorder_name=body.recorder_name or None,
        recorder_id=recorder.id if recorder else None,
        status_tag=build_status_tag(body.farm_activity_type),
        farm_activity_type=normalize_farm_activity_type(body.farm_activity_type),
        harvest_weight_kg=body.harvest_weight_kg or 0,
    )
    for field in _PLAIN_FIELDS:
        setattr(log, field, getattr(body, field) or None)
    db.add(log)
    await db.flush()

    logger.info(f"Created growth log for {date_key(log.date)} ({log.farm_activity_type.value})")
    return await _reload(db, log.id)


# ── Update ───────────────────────────────────────────────────

@router.put("/{log_id}", response_model=GrowthLogOut)
async def update_growth_log(
    log_id: str,
    body: GrowthLogUpdate,
    db: AsyncSession = Depends(get_db),
):
    log = await _get_log(db, log_id)
    provided = body.model_fields_set

    if "date" in provided:
        if body.date is None:
            raise HTTPException(status_code=400, detail="date cannot be empty")
        log.date = body.date
    if "recorder_name" in provided:
        recorder = await find_personnel_by_name(db, body.recorder_name, PersonnelRole.RECORDER)
        log.recorder_name = body.recorder_name or None
        log.recorder_id = recorder.id if recorder else None
    if "farm_activity_type" in provided:
        # Clearing the activity leaves an empty tag rather than NULL
        log.status_tag = build_status_tag(body.farm_activity_type) or {}
        log.farm_activity_type = normalize_farm_activity_type(body.farm_activity_type)
    if "harvest_weight_kg" in provided:
        log.harvest_weight_kg = body.harvest_weight_kg or 0
    for field in _PLAIN_FIELDS:
        if field in provided:
            setattr(log, field, getattr(body, field) or None)

    await db.flush()
    logger.info(f"Updated growth log {date_key(log.date)}")
    return await _reload(db, log.id)


# ── Delete ───────────────────────────────────────────────────

@router.delete("/{log_id}", response_model=GrowthLogOut)
async def delete_growth_log(log_id: str, db: AsyncSession = Depends(get_db)):
    log = await _get_log(db, log_id)
    out = GrowthLogOut.model_validate(log)
    await db.delete(log)
    await db.flush()
    logger.info(f"Deleted growth log {date_key(out.date)}")
    return out
