"""Content template router.

Endpoints:
    GET    /api/step-templates                           All step templates, in production order
    PUT    /api/step-templates/{step_name}               Upsert a step template
    GET    /api/title-templates                          All title templates
    POST   /api/title-templates                          Bulk upsert title templates
    GET    /api/appreciation-templates                   All appreciation templates
    PUT    /api/appreciation-templates/{category_name}   Upsert an appreciation template
    DELETE /api/appreciation-templates/{category_name}   Delete an appreciation template
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.templates import (
    PRODUCTION_STEPS,
    AppreciationTemplate,
    ProductionStepTemplate,
    TitleTemplate,
)
from app.schemas.templates import (
    AppreciationTemplateIn,
    AppreciationTemplateOut,
    StepTemplateIn,
    StepTemplateOut,
    TitleTemplateOut,
    TitleTemplatesIn,
)

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])

CRAFT_KEYS = ("purpose", "method", "sensory_change", "value")


def _craft(value: dict | None) -> dict:
    value = value or {}
    return {key: value.get(key) or "" for key in CRAFT_KEYS}


# ── Step templates ───────────────────────────────────────────

@router.get("/step-templates", response_model=list[StepTemplateOut])
async def list_step_templates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(ProductionStepTemplate))
    templates = result.scalars().all()
    return sorted(
        templates,
        key=lambda t: PRODUCTION_STEPS.index(t.step_name)
        if t.step_name in PRODUCTION_STEPS
        else len(PRODUCTION_STEPS),
    )


@router.put("/step-templates/{step_name}", response_model=StepTemplateOut)
async def upsert_step_template(
    step_name: str,
    body: StepTemplateIn,
    db: AsyncSession = Depends(get_db),
):
    if step_name not in PRODUCTION_STEPS:
        raise HTTPException(
            status_code=400,
            detail=f"step_name must be one of {', '.join(PRODUCTION_STEPS)}",
        )

    template = await db.scalar(
        select(ProductionStepTemplate).where(ProductionStepTemplate.step_name == step_name)
    )
    if template is None:
        template = ProductionStepTemplate(step_name=step_name)
        db.add(template)
    template.manual_craft = _craft(body.manual_craft)
    template.modern_craft = _craft(body.modern_craft)
    await db.flush()

    logger.info(f"Saved step template {step_name}")
    return template


# ── Title templates ──────────────────────────────────────────

@router.get("/title-templates", response_model=list[TitleTemplateOut])
async def list_title_templates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(TitleTemplate).order_by(TitleTemplate.category_name.asc()))
    return result.scalars().all()


@router.post("/title-templates", response_model=list[TitleTemplateOut])
async def save_title_templates(body: TitleTemplatesIn, db: AsyncSession = Depends(get_db)):
    """Upsert every ``{category_name, title_template}`` pair in the payload."""
    if not isinstance(body.templates, list):
        raise HTTPException(status_code=400, detail="templates must be an array")
    for index, item in enumerate(body.templates, start=1):
        if (
            not isinstance(item, dict)
            or not item.get("category_name")
            or not item.get("title_template")
        ):
            raise HTTPException(
                status_code=400,
                detail=f"Template {index} needs category_name and title_template",
            )

    saved = []
    for item in body.templates:
        template = await db.scalar(
            select(TitleTemplate).where(TitleTemplate.category_name == item["category_name"])
        )
        if template is None:
            template = TitleTemplate(category_name=item["category_name"])
            db.add(template)
        template.title_template = item["title_template"]
        saved.append(template)
    await db.flush()

    logger.info(f"Saved {len(saved)} title template(s)")
    return saved


# ── Appreciation templates ───────────────────────────────────

@router.get("/appreciation-templates", response_model=list[AppreciationTemplateOut])
async def list_appreciation_templates(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(AppreciationTemplate).order_by(AppreciationTemplate.category_name.asc())
    )
    return result.scalars().all()


@router.put("/appreciation-templates/{category_name}", response_model=AppreciationTemplateOut)
async def upsert_appreciation_template(
    category_name: str,
    body: AppreciationTemplateIn,
    db: AsyncSession = Depends(get_db),
):
    template = await db.scalar(
        select(AppreciationTemplate).where(AppreciationTemplate.category_name == category_name)
    )
    if template is None:
        template = AppreciationTemplate(category_name=category_name)
        db.add(template)
    template.tasting_notes = body.tasting_notes or ""
    template.brewing_suggestion = body.brewing_suggestion or ""
    template.storage_method = body.storage_method or ""
    await db.flush()

    logger.info(f"Saved appreciation template for {category_name}")
    return template


@router.delete(
    "/appreciation-templates/{category_name}",
    response_model=AppreciationTemplateOut,
)
async def delete_appreciation_template(category_name: str, db: AsyncSession = Depends(get_db)):
    template = await db.scalar(
        select(AppreciationTemplate).where(AppreciationTemplate.category_name == category_name)
    )
    if template is None:
        raise HTTPException(status_code=404, detail="Appreciation template not found")

    out = AppreciationTemplateOut.model_validate(template)
    await db.delete(template)
    await db.flush()
    logger.info(f"Deleted appreciation template for {category_name}")
    return out
