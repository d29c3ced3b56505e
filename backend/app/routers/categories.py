"""Tea category router.

Endpoints:
    GET    /api/categories                              List categories
    POST   /api/categories                              Create category
    PUT    /api/categories/{category_id}                Partial update
    DELETE /api/categories/{category_id}                Delete category
    POST   /api/categories/reclassify-harvest-records   Re-run date classification
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.harvest_record import HarvestRecord
from app.models.tea_category import TeaCategory
from app.schemas.category import CategoryCreate, CategoryOut, CategoryUpdate
from app.services.classification import parse_picking_period, reclassify_all_harvest_records
from app.services.slug import generate_slug

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}


def _check_yield(value: float | None) -> None:
    if value is not None and not 0 <= value <= 100:
        raise HTTPException(status_code=400, detail="yield_percentage must be between 0 and 100")


def _strip(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


async def _get_category(db: AsyncSession, category_id: str) -> TeaCategory:
    category = await db.get(TeaCategory, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


# ── List ─────────────────────────────────────────────────────

@router.get("", response_model=list[CategoryOut])
async def list_categories(response: Response, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(TeaCategory).order_by(
            TeaCategory.sort_order.asc(), TeaCategory.created_at.desc()
        )
    )
    response.headers.update(NO_CACHE_HEADERS)
    return result.scalars().all()


# ── Create ───────────────────────────────────────────────────

@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")
    _check_yield(body.yield_percentage)

    start, end = body.picking_start_date, body.picking_end_date
    period = _strip(body.picking_period)
    if period and start is None and end is None:
        parsed = parse_picking_period(period)
        if parsed:
            start, end = parsed
            logger.info(f"Parsed picking period {period!r} as {start.date()} - {end.date()}")
        else:
            logger.warning(f"Could not parse picking period {period!r}")

    if start and end and start > end:
        raise HTTPException(status_code=400, detail="Picking start date must not be after end date")

    existing = await db.scalar(select(TeaCategory).where(TeaCategory.name == name))
    if existing:
        raise HTTPException(status_code=400, detail="Category name already exists")

    category = TeaCategory(
        name=name,
        slug=generate_slug(name),
        image_url=_strip(body.image_url),
        description=_strip(body.description),
        yield_percentage=body.yield_percentage or 0,
        picking_period=period,
        picking_start_date=start,
        picking_end_date=end,
        sort_order=body.sort_order if body.sort_order is not None else 999,
    )
    db.add(category)
    await db.flush()

    logger.info(f"Created category {category.name} ({category.slug})")
    return category


# ── Update ───────────────────────────────────────────────────

@router.put("/{category_id}", response_model=CategoryOut)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    provided = body.model_fields_set
    if "name" in provided and not (body.name or "").strip():
        raise HTTPException(status_code=400, detail="Category name is required")
    if "yield_percentage" in provided:
        if body.yield_percentage is None:
            raise HTTPException(status_code=400, detail="yield_percentage must be between 0 and 100")
        _check_yield(body.yield_percentage)

    category = await _get_category(db, category_id)

    auto_start = auto_end = None
    period = _strip(body.picking_period)
    if (
        period
        and "picking_start_date" not in provided
        and "picking_end_date" not in provided
    ):
        parsed = parse_picking_period(period)
        if parsed:
            auto_start, auto_end = parsed

    start = body.picking_start_date if "picking_start_date" in provided else auto_start
    end = body.picking_end_date if "picking_end_date" in provided else auto_end
    if start and end and start > end:
        raise HTTPException(status_code=400, detail="Picking start date must not be after end date")

    if "name" in provided:
        old_name = category.name
        category.name = body.name.strip()
        category.slug = generate_slug(category.name)
        if category.name != old_name:
            await db.execute(
                update(HarvestRecord)
                .where(HarvestRecord.category_id == category.id)
                .values(category_name=category.name)
            )
            logger.info(f"Renamed category {old_name} to {category.name} on its harvest records")
    if "image_url" in provided:
        category.image_url = _strip(body.image_url)
    if "description" in provided:
        category.description = _strip(body.description)
    if "yield_percentage" in provided:
        category.yield_percentage = body.yield_percentage or 0
    if "picking_period" in provided:
        category.picking_period = period
    if "picking_start_date" in provided or auto_start:
        category.picking_start_date = start
    if "picking_end_date" in provided or auto_end:
        category.picking_end_date = end
    if "sort_order" in provided:
        category.sort_order = body.sort_order or 999

    await db.flush()
    logger.info(f"Updated category {category.name}")
    return category


# ── Delete ───────────────────────────────────────────────────

@router.delete("/{category_id}", response_model=CategoryOut)
async def delete_category(category_id: str, db: AsyncSession = Depends(get_db)):
    category = await _get_category(db, category_id)
    out = CategoryOut.model_validate(category)
    await db.delete(category)
    await db.flush()
    logger.info(f"Deleted category {out.name}")
    return out


# ── Reclassification ─────────────────────────────────────────

@router.post("/reclassify-harvest-records")
async def reclassify_harvest_records(db: AsyncSession = Depends(get_db)):
    """Recompute every harvest record's category from its harvest date."""
    changed = await reclassify_all_harvest_records(db)
    return {"changed": changed}
