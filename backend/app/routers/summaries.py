"""Monthly summary router.

Endpoints:
    GET    /api/monthly-summaries                 ?month=YYYY-MM → one summary, else the latest 6
    GET    /api/monthly-summaries/{summary_id}    Single summary
    POST   /api/monthly-summaries                 Create a summary by hand
    PUT    /api/monthly-summaries/{summary_id}    Partial update
    DELETE /api/monthly-summaries/{summary_id}    Delete summary
    GET    /api/summaries                         All summaries, newest month first
    POST   /api/summaries/generate                Aggregate a month's logs into its summary
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.monthly_summary import MonthlySummary
from app.schemas.summary import (
    GenerateSummaryRequest,
    MonthlySummaryCreate,
    MonthlySummaryOut,
    MonthlySummaryUpdate,
)
from app.services.monthly_summary import generate_monthly_summary
from app.utils.dates import MONTH_RE

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

RECENT_SUMMARIES = 6

_FIELDS = (
    "plot_id",
    "detail_gallery",
    "harvest_stats",
    "farm_calendar",
    "abnormal_summary",
    "climate_summary",
    "next_month_plan",
)


async def _get_summary(db: AsyncSession, summary_id: str) -> MonthlySummary:
    summary = await db.get(MonthlySummary, summary_id)
    if not summary:
        raise HTTPException(status_code=404, detail="Monthly summary not found")
    return summary


async def _reload(db: AsyncSession, summary_id: str) -> MonthlySummary:
    result = await db.execute(
        select(MonthlySummary)
        .where(MonthlySummary.id == summary_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


# ── Monthly summaries ────────────────────────────────────────

@router.get(
    "/monthly-summaries",
    response_model=MonthlySummaryOut | list[MonthlySummaryOut] | None,
)
async def list_monthly_summaries(
    month: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    if month and MONTH_RE.match(month):
        return await db.scalar(select(MonthlySummary).where(MonthlySummary.year_month == month))

    result = await db.execute(
        select(MonthlySummary)
        .order_by(MonthlySummary.year_month.desc())
        .limit(RECENT_SUMMARIES)
    )
    return result.scalars().all()


@router.get("/monthly-summaries/{summary_id}", response_model=MonthlySummaryOut)
async def get_monthly_summary(summary_id: str, db: AsyncSession = Depends(get_db)):
    return await _get_summary(db, summary_id)


@router.post(
    "/monthly-summaries",
    response_model=MonthlySummaryOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_monthly_summary(
    body: MonthlySummaryCreate,
    db: AsyncSession = Depends(get_db),
):
    if not body.year_month:
        raise HTTPException(status_code=400, detail="year_month is required")

    existing = await db.scalar(
        select(MonthlySummary).where(MonthlySummary.year_month == body.year_month)
    )
    if existing:
        raise HTTPException(
            status_code=400,
            detail=f"A summary for {body.year_month} already exists; update it instead",
        )

    summary = MonthlySummary(year_month=body.year_month)
    for field in _FIELDS:
        setattr(summary, field, getattr(body, field) or None)
    db.add(summary)
    await db.flush()

    logger.info(f"Created monthly summary {summary.year_month}")
    return await _reload(db, summary.id)


@router.put("/monthly-summaries/{summary_id}", response_model=MonthlySummaryOut)
async def update_monthly_summary(
    summary_id: str,
    body: MonthlySummaryUpdate,
    db: AsyncSession = Depends(get_db),
):
    summary = await _get_summary(db, summary_id)
    provided = body.model_fields_set

    if "year_month" in provided:
        if not body.year_month:
            raise HTTPException(status_code=400, detail="year_month cannot be empty")
        summary.year_month = body.year_month
    for field in _FIELDS:
        if field in provided:
            setattr(summary, field, getattr(body, field) or None)

    await db.flush()
    logger.info(f"Updated monthly summary {summary.year_month}")
    return await _reload(db, summary.id)


@router.delete("/monthly-summaries/{summary_id}", response_model=MonthlySummaryOut)
async def delete_monthly_summary(summary_id: str, db: AsyncSession = Depends(get_db)):
    summary = await _get_summary(db, summary_id)
    out = MonthlySummaryOut.model_validate(summary)
    await db.delete(summary)
    await db.flush()
    logger.info(f"Deleted monthly summary {out.year_month}")
    return out


# ── Generation ───────────────────────────────────────────────

@router.get("/summaries", response_model=list[MonthlySummaryOut])
async def list_all_summaries(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(MonthlySummary).order_by(MonthlySummary.year_month.desc()))
    return result.scalars().all()


@router.post("/summaries/generate", response_model=MonthlySummaryOut)
async def generate_summary(body: GenerateSummaryRequest, db: AsyncSession = Depends(get_db)):
    """Roll the month's daily logs and harvest records into its summary (upsert)."""
    if not body.month:
        raise HTTPException(status_code=400, detail="month is required (YYYY-MM)")
    return await generate_monthly_summary(db, body.month)
