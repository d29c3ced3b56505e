"""Harvest record router.

Endpoints:
    POST   /api/harvest-records                 Record a day's picking
    GET    /api/harvest-records                 List records (optional ?month=YYYY-MM)
    GET    /api/harvest-records/unassigned      Records not yet used by a batch
    POST   /api/harvest-records/sync-weather    Copy weather from same-day growth logs
    GET    /api/harvest-records/{record_id}     Single record with its batch
    PUT    /api/harvest-records/{record_id}     Partial update
    DELETE /api/harvest-records/{record_id}     Unlink from batches and delete
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.batch import Batch
from app.models.batch_harvest_record import BatchHarvestRecord
from app.models.growth_log import DailyGrowthLog
from app.models.harvest_record import HarvestRecord
from app.models.personnel import PersonnelRole
from app.schemas.harvest_record import (
    AssignedBatchBrief,
    HarvestRecordCreate,
    HarvestRecordDetailOut,
    HarvestRecordOut,
    HarvestRecordUpdate,
    WeatherSyncDetail,
    WeatherSyncResult,
)
from app.services.classification import classify_harvest_date
from app.services.personnel import find_personnel_by_name
from app.utils.dates import MONTH_RE, date_key, month_range

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

LIST_LIMIT = 500


def _valid_member_count(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return isinstance(value, int) and value >= 1


async def _get_record(db: AsyncSession, record_id: str) -> HarvestRecord:
    record = await db.get(HarvestRecord, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Harvest record not found")
    return record


async def _reload(db: AsyncSession, record_id: str) -> HarvestRecord:
    result = await db.execute(
        select(HarvestRecord)
        .where(HarvestRecord.id == record_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


# ── Create ───────────────────────────────────────────────────

@router.post("", response_model=HarvestRecordOut, status_code=status.HTTP_201_CREATED)
async def create_harvest_record(
    body: HarvestRecordCreate,
    db: AsyncSession = Depends(get_db),
):
    if body.harvest_date is None or not body.fresh_leaf_weight_kg:
        raise HTTPException(
            status_code=400, detail="harvest_date and fresh_leaf_weight_kg are required"
        )
    team = body.harvest_team or {}
    if not _valid_member_count(team.get("member_count")):
        raise HTTPException(status_code=400, detail="Harvest team needs at least 1 member")

    leader = await find_personnel_by_name(db, team.get("leader_name"), PersonnelRole.HARVEST_LEAD)
    category_id, category_name = await classify_harvest_date(db, body.harvest_date)

    record = HarvestRecord(
        harvest_date=body.harvest_date,
        fresh_leaf_weight_kg=body.fresh_leaf_weight_kg,
        weather=body.weather,
        images_and_videos=body.images_and_videos or [],
        media_urls=body.media_urls or [],
        harvest_team=body.harvest_team,
        harvest_team_id=leader.id if leader else None,
        category_id=category_id,
        category_name=category_name,
        notes=body.notes or None,
    )
    db.add(record)
    await db.flush()

    logger.info(
        f"Created harvest record {date_key(record.harvest_date)} "
        f"{record.fresh_leaf_weight_kg}kg → {category_name or 'unclassified'}"
    )
    return await _reload(db, record.id)


# ── List ─────────────────────────────────────────────────────

@router.get("", response_model=list[HarvestRecordOut])
async def list_harvest_records(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(HarvestRecord)
    if month and MONTH_RE.match(month):
        try:
            start, end = month_range(month)
        except ValueError:
            raise HTTPException(status_code=400, detail="month must be YYYY-MM")
        stmt = stmt.where(HarvestRecord.harvest_date >= start, HarvestRecord.harvest_date <= end)

    result = await db.execute(
        stmt.order_by(HarvestRecord.harvest_date.desc()).limit(LIST_LIMIT)
    )
    return result.scalars().all()


@router.get("/unassigned", response_model=list[HarvestRecordOut])
async def list_unassigned_harvest_records(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(HarvestRecord)
        .where(HarvestRecord.assigned_batch_id.is_(None))
        .order_by(HarvestRecord.harvest_date.desc())
    )
    return result.scalars().all()


# ── Weather sync ─────────────────────────────────────────────

@router.post("/sync-weather", response_model=WeatherSyncResult)
async def sync_harvest_weather(db: AsyncSession = Depends(get_db)):
    """Copy ``{icon, temperature_range}`` from each record's same-day growth log."""
    records = (await db.execute(select(HarvestRecord))).scalars().all()
    logs = (await db.execute(select(DailyGrowthLog))).scalars().all()
    weather_by_day = {date_key(log.date): log.weather for log in logs if log.weather}

    synced = no_data = errors = 0
    details = []
    for record in records:
        day = date_key(record.harvest_date)
        weather = weather_by_day.get(day)
        if weather is None:
            no_data += 1
            details.append(WeatherSyncDetail(
                date=day, status="no_data", message="No growth log for this date"
            ))
            continue
        if not isinstance(weather, dict):
            errors += 1
            details.append(WeatherSyncDetail(
                date=day, status="error", error="Growth log weather is not an object"
            ))
            continue

        record.weather = {
            "icon": weather.get("icon") or "",
            "temperature_range": weather.get("temperature_range") or "",
        }
        synced += 1
        details.append(WeatherSyncDetail(date=day, status="synced", weather=weather))

    await db.flush()
    logger.info(f"Weather sync: {synced} synced, {no_data} without log, {errors} errors")
    return WeatherSyncResult(
        total=len(records), synced=synced, no_data=no_data, errors=errors, details=details
    )


# ── Detail ───────────────────────────────────────────────────

@router.get("/{record_id}", response_model=HarvestRecordDetailOut)
async def get_harvest_record(record_id: str, db: AsyncSession = Depends(get_db)):
    record = await _get_record(db, record_id)
    detail = HarvestRecordDetailOut.model_validate(record)
    if record.assigned_batch_id:
        batch = await db.get(Batch, record.assigned_batch_id)
        if batch:
            detail.assigned_batch = AssignedBatchBrief.model_validate(batch)
    return detail


# ── Update ───────────────────────────────────────────────────

@router.put("/{record_id}", response_model=HarvestRecordOut)
async def update_harvest_record(
    record_id: str,
    body: HarvestRecordUpdate,
    db: AsyncSession = Depends(get_db),
):
    provided = body.model_fields_set
    team = body.harvest_team or {}
    if "member_count" in team and not _valid_member_count(team["member_count"]):
        raise HTTPException(status_code=400, detail="Harvest team needs at least 1 member")

    record = await _get_record(db, record_id)

    if "harvest_date" in provided:
        if body.harvest_date is None:
            raise HTTPException(status_code=400, detail="harvest_date cannot be empty")
        record.harvest_date = body.harvest_date
        record.category_id, record.category_name = await classify_harvest_date(
            db, body.harvest_date
        )
    if "fresh_leaf_weight_kg" in provided:
        if body.fresh_leaf_weight_kg is None:
            raise HTTPException(status_code=400, detail="fresh_leaf_weight_kg cannot be empty")
        record.fresh_leaf_weight_kg = body.fresh_leaf_weight_kg
    for field in ("weather", "images_and_videos", "media_urls", "harvest_team"):
        if field in provided:
            setattr(record, field, getattr(body, field))
    if "leader_name" in team:
        leader = await find_personnel_by_name(
            db, team["leader_name"], PersonnelRole.HARVEST_LEAD
        )
        record.harvest_team_id = leader.id if leader else None
    if "notes" in provided:
        record.notes = body.notes or None

    await db.flush()
    logger.info(f"Updated harvest record {record.id}")
    return await _reload(db, record.id)


# ── Delete ───────────────────────────────────────────────────

@router.delete("/{record_id}", response_model=HarvestRecordOut)
async def delete_harvest_record(record_id: str, db: AsyncSession = Depends(get_db)):
    record = await _get_record(db, record_id)
    out = HarvestRecordOut.model_validate(record)

    await db.execute(
        delete(BatchHarvestRecord).where(BatchHarvestRecord.harvest_record_id == record_id)
    )
    await db.delete(record)
    await db.flush()

    logger.info(f"Deleted harvest record {record_id} ({date_key(out.harvest_date)})")
    return out
