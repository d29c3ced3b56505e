"""Batch router: production batches and their traceability data.

Endpoints:
    POST   /api/batches                                          Create batch (links harvest records)
    GET    /api/batches                                          List batches
    GET    /api/batches/{batch_id}                               Single batch
    GET    /api/batches/{batch_id}/qr                            QR code SVG for packaging labels
    PUT    /api/batches/{batch_id}                               Partial update
    PUT    /api/batches/{batch_id}/production-steps              Replace production steps
    PUT    /api/batches/{batch_id}/steps/{step_index}/{craft_type}  Update one step's craft
    DELETE /api/batches/{batch_id}                               Unlink harvest records and delete
"""

import io
import json
import logging

import segno
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.middleware.exceptions import BusinessLogicError, ConflictError
from app.models.batch import Batch, BatchStatus
from app.models.batch_harvest_record import BatchHarvestRecord
from app.models.harvest_record import HarvestRecord
from app.schemas.batch import (
    BatchCreate,
    BatchOut,
    BatchUpdate,
    ProductionStepsUpdate,
    StepCraftUpdate,
)
from app.services.batches import (
    CRAFT_TYPES,
    apply_step_craft,
    default_production_steps,
    reload_batch,
    resolve_grade_id,
    resolve_tea_master_id,
    validate_production_steps,
)
from app.services.uploads import public_base_url

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

LIST_LIMIT = 200
STEP_COUNT = 5


async def _get_batch(db: AsyncSession, batch_id: str) -> Batch:
    batch = await db.get(Batch, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Batch not found")
    return batch


# ── Create ───────────────────────────────────────────────────

@router.post("", response_model=BatchOut, status_code=status.HTTP_201_CREATED)
async def create_batch(body: BatchCreate, db: AsyncSession = Depends(get_db)):
    """Create a batch and link the harvest records it was made from.

    The batch, its link rows and each record's ``assigned_batch_id`` are
    written in the request's transaction; a missing record id rolls all of
    it back.
    """
    if not body.batch_number or not body.category_name:
        raise HTTPException(status_code=400, detail="batch_number and category_name are required")

    existing = await db.scalar(select(Batch).where(Batch.batch_number == body.batch_number))
    if existing:
        raise ConflictError(
            f"Batch number {body.batch_number} already exists",
            error_code="DUPLICATE_BATCH_NUMBER",
        )

    batch = Batch(
        batch_number=body.batch_number,
        category_name=body.category_name,
        tea_master=body.tea_master,
        tea_master_id=await resolve_tea_master_id(db, body.tea_master),
        production_steps=body.production_steps or default_production_steps(),
        tasting_report=body.tasting_report,
        product_appreciation=body.product_appreciation,
        final_product_weight_kg=body.final_product_weight_kg or None,
        grade=body.grade or None,
        grade_id=await resolve_grade_id(db, body.grade),
        status=body.status or BatchStatus.IN_PROGRESS,
        cover_image_url=body.cover_image_url or None,
        detail_cover_image_url=body.detail_cover_image_url or None,
        images_and_videos=body.images_and_videos or [],
        notes=body.notes or None,
        detail_title=body.detail_title or None,
    )
    if body.production_date:
        batch.production_date = body.production_date
    db.add(batch)
    await db.flush()

    record_ids = list(dict.fromkeys(body.harvest_records_ids or []))
    if record_ids:
        found = await db.scalars(select(HarvestRecord.id).where(HarvestRecord.id.in_(record_ids)))
        missing = set(record_ids) - set(found.all())
        if missing:
            raise BusinessLogicError(
                "Some harvest records do not exist",
                error_code="HARVEST_RECORD_NOT_FOUND",
                details={"missing": sorted(missing)},
            )
        db.add_all(
            BatchHarvestRecord(batch_id=batch.id, harvest_record_id=record_id)
            for record_id in record_ids
        )
        await db.execute(
            update(HarvestRecord)
            .where(HarvestRecord.id.in_(record_ids))
            .values(assigned_batch_id=batch.id)
        )
        await db.flush()

    logger.info(
        f"Created batch {batch.batch_number} ({batch.category_name}) "
        f"with {len(record_ids)} harvest record(s)"
    )
    return await reload_batch(db, batch.id)


# ── List / detail ────────────────────────────────────────────

@router.get("", response_model=list[BatchOut])
async def list_batches(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(Batch).order_by(Batch.production_date.desc()).limit(LIST_LIMIT)
    )
    return result.scalars().all()


@router.get("/{batch_id}", response_model=BatchOut)
async def get_batch(batch_id: str, db: AsyncSession = Depends(get_db)):
    return await _get_batch(db, batch_id)


# ── QR code ──────────────────────────────────────────────────

@router.get("/{batch_id}/qr")
async def get_batch_qr(batch_id: str, request: Request, db: AsyncSession = Depends(get_db)):
    """Return an SVG QR code pointing at the batch's public traceability record."""
    batch = await _get_batch(db, batch_id)

    qr_data = json.dumps({
        "batch_id": batch.id,
        "batch_number": batch.batch_number,
        "category_name": batch.category_name,
        "production_date": batch.production_date.isoformat() if batch.production_date else None,
        "trace_url": f"{public_base_url(request)}/api/public/batches/{batch.id}",
    }, separators=(",", ":"), ensure_ascii=False)

    qr = segno.make(qr_data)
    buf = io.BytesIO()
    qr.save(buf, kind="svg", scale=4, dark="#15803d")
    return Response(content=buf.getvalue(), media_type="image/svg+xml")


# ── Update ───────────────────────────────────────────────────

@router.put("/{batch_id}", response_model=BatchOut)
async def update_batch(
    batch_id: str,
    body: BatchUpdate,
    db: AsyncSession = Depends(get_db),
):
    batch = await _get_batch(db, batch_id)
    provided = body.model_fields_set

    if "batch_number" in provided:
        if not body.batch_number:
            raise HTTPException(status_code=400, detail="batch_number cannot be empty")
        if body.batch_number != batch.batch_number:
            clash = await db.scalar(select(Batch).where(Batch.batch_number == body.batch_number))
            if clash:
                raise ConflictError(
                    f"Batch number {body.batch_number} already exists",
                    error_code="DUPLICATE_BATCH_NUMBER",
                )
        batch.batch_number = body.batch_number
    if "category_name" in provided:
        if not body.category_name:
            raise HTTPException(status_code=400, detail="category_name cannot be empty")
        batch.category_name = body.category_name

    if "tea_master" in provided:
        batch.tea_master = body.tea_master
        # Only a name key re-links the master
        if body.tea_master is None or "name" in body.tea_master:
            batch.tea_master_id = await resolve_tea_master_id(db, body.tea_master)
    if "grade" in provided:
        batch.grade = body.grade or None
        batch.grade_id = await resolve_grade_id(db, body.grade)

    for field in ("tasting_report", "product_appreciation", "images_and_videos"):
        if field in provided:
            setattr(batch, field, getattr(body, field))
    for field in ("cover_image_url", "detail_cover_image_url", "notes", "detail_title"):
        if field in provided:
            setattr(batch, field, getattr(body, field) or None)
    if "final_product_weight_kg" in provided:
        batch.final_product_weight_kg = body.final_product_weight_kg or None
    if "production_date" in provided and body.production_date is not None:
        batch.production_date = body.production_date
    if "status" in provided and body.status is not None:
        batch.status = body.status

    await db.flush()
    logger.info(f"Updated batch {batch.batch_number}")
    return await reload_batch(db, batch.id)


@router.put("/{batch_id}/production-steps", response_model=BatchOut)
async def update_production_steps(
    batch_id: str,
    body: ProductionStepsUpdate,
    db: AsyncSession = Depends(get_db),
):
    error = validate_production_steps(body.production_steps)
    if error:
        raise HTTPException(status_code=400, detail=error)

    batch = await _get_batch(db, batch_id)
    batch.production_steps = body.production_steps
    await db.flush()

    logger.info(f"Replaced {len(body.production_steps)} production step(s) on {batch.batch_number}")
    return await reload_batch(db, batch.id)


@router.put("/{batch_id}/steps/{step_index}/{craft_type}", response_model=BatchOut)
async def update_step_craft(
    batch_id: str,
    step_index: str,
    craft_type: str,
    body: StepCraftUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        index = int(step_index)
    except ValueError:
        index = -1
    if not 0 <= index < STEP_COUNT:
        raise HTTPException(status_code=400, detail=f"step_index must be 0-{STEP_COUNT - 1}")
    if craft_type not in CRAFT_TYPES:
        raise HTTPException(status_code=400, detail="craft_type must be manual or modern")
    values = body.model_dump(exclude_unset=True)
    if "media_urls" in values and not isinstance(values["media_urls"], list):
        raise HTTPException(status_code=400, detail="media_urls must be an array")

    batch = await _get_batch(db, batch_id)
    steps = batch.production_steps or []
    if len(steps) <= index:
        raise HTTPException(status_code=400, detail=f"Batch has no production step at index {index}")

    batch.production_steps = apply_step_craft(steps, index, craft_type, values)
    await db.flush()

    step_name = batch.production_steps[index].get("step_name")
    logger.info(f"Saved {craft_type} craft for step {step_name} on {batch.batch_number}")
    return await reload_batch(db, batch.id)


# ── Delete ───────────────────────────────────────────────────

@router.delete("/{batch_id}", response_model=BatchOut)
async def delete_batch(batch_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a batch; its harvest records become unassigned again."""
    batch = await _get_batch(db, batch_id)
    out = BatchOut.model_validate(batch)

    await db.execute(delete(BatchHarvestRecord).where(BatchHarvestRecord.batch_id == batch_id))
    await db.execute(
        update(HarvestRecord)
        .where(HarvestRecord.assigned_batch_id == batch_id)
        .values(assigned_batch_id=None)
    )
    await db.execute(delete(Batch).where(Batch.id == batch_id))
    await db.flush()

    logger.info(f"Deleted batch {out.batch_number}")
    return out
