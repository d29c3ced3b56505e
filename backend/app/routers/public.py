"""Public router: read-only data for the marketing and traceability site.

No login required.

Endpoints:
    GET /api/public/landing-page                  Plot, categories, CTA background, footer
    GET /api/public/growth-data                   A month's daily logs and summary (?month=)
    GET /api/public/monthly-summary               A month's summary (?month=)
    GET /api/public/categories                    Categories with published batches
    GET /api/public/categories/{slug}/batches     Published batches of a category
    GET /api/public/weather-templates             Active weather templates and icon map
    GET /api/public/batches                       Published batches (?category= | ?slug= | ?category_slug=)
    GET /api/public/batches/{batch_id}            Published batch with its harvest links
    GET /api/public/adoption-plans                All three adoption plans
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.adoption_plan import AdoptionPlanType
from app.models.batch import Batch, BatchStatus
from app.models.growth_log import DailyGrowthLog
from app.models.monthly_summary import MonthlySummary
from app.models.plot import Plot
from app.models.tea_category import TeaCategory
from app.models.templates import WeatherTemplate
from app.schemas.batch import PublicBatchDetailOut, PublicBatchList, PublicBatchOut
from app.schemas.category import CategoryMeta, PublicCategoryCount
from app.schemas.landing import LandingPageOut
from app.schemas.public import (
    GrowthDataOut,
    PublicAdoptionPlans,
    PublicMonthlySummaryOut,
    PublicWeatherTemplates,
)
from app.services.adoption_plans import get_or_create_plan
from app.services.growth_logs import with_harvest_info
from app.services.site_settings import CTA_BACKGROUND_KEY, get_setting, read_footer
from app.utils.dates import PUBLIC_MONTH_RE, month_range

logger = logging.getLogger(__name__)

router = APIRouter()

PUBLIC_BATCH_LIMIT = 50


def _require_month(month: str | None) -> str:
    if not month:
        raise HTTPException(status_code=400, detail="month is required (YYYY-MM)")
    if not PUBLIC_MONTH_RE.match(month):
        raise HTTPException(status_code=400, detail="month must be YYYY-MM, e.g. 2025-08")
    return month


async def _category_by_slug(db: AsyncSession, slug: str | None) -> TeaCategory | None:
    slug = (slug or "").strip()
    if not slug:
        return None
    return await db.scalar(
        select(TeaCategory).where(func.lower(TeaCategory.slug) == slug.lower()).limit(1)
    )


async def _published_batches(db: AsyncSession, category_name: str | None = None) -> list[Batch]:
    stmt = (
        select(Batch)
        .where(Batch.status == BatchStatus.PUBLISHED)
        .order_by(Batch.production_date.desc())
        .limit(PUBLIC_BATCH_LIMIT)
    )
    if category_name:
        stmt = stmt.where(Batch.category_name == category_name)
    return list((await db.execute(stmt)).scalars().all())


def _batch_list(batches: list[Batch], category: TeaCategory | None) -> PublicBatchList:
    return PublicBatchList(
        data=[PublicBatchOut.model_validate(batch) for batch in batches],
        count=len(batches),
        category=CategoryMeta.model_validate(category) if category else None,
    )


# ── Landing page ─────────────────────────────────────────────

@router.get("/landing-page", response_model=LandingPageOut)
async def get_landing_page(db: AsyncSession = Depends(get_db)):
    plot = await db.scalar(select(Plot).order_by(Plot.created_at.desc()).limit(1))
    categories = await db.execute(
        select(TeaCategory).order_by(TeaCategory.sort_order.asc(), TeaCategory.created_at.desc())
    )
    cta = await get_setting(db, CTA_BACKGROUND_KEY)
    footer = await read_footer(db)

    return {
        "plot": plot,
        "categories": categories.scalars().all(),
        "cta_bg": cta.value if cta else None,
        "footer": footer,
    }


# ── Growth ───────────────────────────────────────────────────

@router.get("/growth-data", response_model=GrowthDataOut)
async def get_growth_data(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    month = _require_month(month)
    start, end = month_range(month)

    result = await db.execute(
        select(DailyGrowthLog)
        .where(DailyGrowthLog.date >= start, DailyGrowthLog.date <= end)
        .order_by(DailyGrowthLog.date.asc())
    )
    logs = await with_harvest_info(db, list(result.scalars().all()))
    summary = await db.scalar(select(MonthlySummary).where(MonthlySummary.year_month == month))

    logger.info(f"Public growth data for {month}: {len(logs)} log(s), summary={summary is not None}")
    return GrowthDataOut(
        month=month,
        daily_logs=logs,
        monthly_summary=summary,
        daily_logs_count=len(logs),
        has_monthly_summary=summary is not None,
    )


@router.get("/monthly-summary", response_model=PublicMonthlySummaryOut)
async def get_public_monthly_summary(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    month = _require_month(month)
    summary = await db.scalar(select(MonthlySummary).where(MonthlySummary.year_month == month))
    return PublicMonthlySummaryOut(month=month, summary=summary, has_summary=summary is not None)


# ── Categories / weather ─────────────────────────────────────

@router.get("/categories", response_model=list[PublicCategoryCount])
async def list_public_categories(db: AsyncSession = Depends(get_db)):
    """Categories that have at least one published batch, in display order."""
    counts = (
        select(Batch.category_name, func.count(Batch.id).label("count"))
        .where(Batch.status == BatchStatus.PUBLISHED)
        .group_by(Batch.category_name)
        .subquery()
    )
    result = await db.execute(
        select(TeaCategory.name, TeaCategory.slug, counts.c.count)
        .join(counts, counts.c.category_name == TeaCategory.name)
        .order_by(TeaCategory.sort_order.asc(), TeaCategory.created_at.desc())
    )
    return [
        PublicCategoryCount(name=name, slug=slug, count=count)
        for name, slug, count in result.all()
        if count
    ]


@router.get("/categories/{slug}/batches", response_model=PublicBatchList)
async def list_category_batches(slug: str, db: AsyncSession = Depends(get_db)):
    if not slug.strip():
        raise HTTPException(status_code=400, detail="Category slug is required")
    category = await _category_by_slug(db, slug)
    if category is None:
        logger.warning(f"Public batches requested for unknown category slug {slug!r}")
        return PublicBatchList(data=[], count=0, category=None)
    return _batch_list(await _published_batches(db, category.name), category)


@router.get("/weather-templates", response_model=PublicWeatherTemplates)
async def list_public_weather_templates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(WeatherTemplate)
        .where(WeatherTemplate.is_active.is_(True))
        .order_by(WeatherTemplate.sort_order.asc())
    )
    templates = result.scalars().all()
    return {
        "templates": templates,
        "icon_map": {template.name: template.svg_icon or "" for template in templates},
    }


# ── Batches ──────────────────────────────────────────────────

@router.get("/batches", response_model=PublicBatchList)
async def list_public_batches(
    category: str | None = Query(None),
    slug: str | None = Query(None),
    category_slug: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    slug_to_use = (category_slug or "").strip() or (slug or "").strip()
    if slug_to_use:
        record = await _category_by_slug(db, slug_to_use)
        if record is None:
            logger.warning(f"Public batches requested for unknown category slug {slug_to_use!r}")
            return PublicBatchList(data=[], count=0, category=None)
        return _batch_list(await _published_batches(db, record.name), record)

    category_name = (category or "").strip() or None
    return _batch_list(await _published_batches(db, category_name), None)


@router.get("/batches/{batch_id}", response_model=PublicBatchDetailOut)
async def get_public_batch(batch_id: str, db: AsyncSession = Depends(get_db)):
    batch = await db.get(Batch, batch_id)
    if not batch:
        raise HTTPException(status_code=404, detail="Batch not found")
    if batch.status != BatchStatus.PUBLISHED:
        raise HTTPException(status_code=403, detail="This batch has not been published")
    return batch


# ── Adoption plans ───────────────────────────────────────────

@router.get("/adoption-plans", response_model=PublicAdoptionPlans)
async def list_public_adoption_plans(db: AsyncSession = Depends(get_db)):
    return {
        "private": await get_or_create_plan(db, AdoptionPlanType.PRIVATE),
        "enterprise": await get_or_create_plan(db, AdoptionPlanType.ENTERPRISE),
        "b2b": await get_or_create_plan(db, AdoptionPlanType.B2B),
    }
