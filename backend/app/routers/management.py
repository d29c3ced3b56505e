"""Management router: reference data edited from the admin console.

Endpoints:
    GET    /api/user                               Current session user
    GET    /api/grades                             List grades
    POST   /api/grades                             Create grade
    PUT    /api/grades/{grade_id}                  Update grade
    DELETE /api/grades/{grade_id}                  Delete grade
    GET    /api/personnel                          List personnel (?role=)
    POST   /api/personnel                          Create personnel
    PUT    /api/personnel/{personnel_id}           Update personnel
    DELETE /api/personnel/{personnel_id}           Delete personnel
    GET    /api/weather-templates                  List weather templates (?active_only=)
    POST   /api/weather-templates                  Create weather template
    PUT    /api/weather-templates/{template_id}    Update weather template
    DELETE /api/weather-templates/{template_id}    Delete weather template
    GET    /api/adoption-plans/{plan_type}         Plan content (created on first read)
    PUT    /api/adoption-plans/{plan_type}         Update plan content
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.deps import require_login
from app.database import get_db
from app.models.adoption_plan import AdoptionPlanType
from app.models.grade import Grade
from app.models.personnel import Personnel
from app.models.templates import WeatherTemplate
from app.schemas.auth import CurrentUserResponse
from app.schemas.management import (
    AdoptionPlanIn,
    AdoptionPlanOut,
    GradeIn,
    GradeOut,
    PersonnelIn,
    PersonnelOut,
    WeatherTemplateIn,
    WeatherTemplateOut,
)
from app.services.adoption_plans import PLAN_FIELDS, PLAN_TYPES, get_or_create_plan, upsert_plan
from app.services.personnel import ROLE_FILTER_MAP, ROLE_MAP, clamp_experience

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_login)])


@router.get("/user", response_model=CurrentUserResponse)
async def get_current_user(user: dict = Depends(require_login)):
    return {"user": user}


# ── Grades ───────────────────────────────────────────────────

async def _get_grade(db: AsyncSession, grade_id: str) -> Grade:
    grade = await db.get(Grade, grade_id)
    if not grade:
        raise HTTPException(status_code=404, detail="Grade not found")
    return grade


async def _check_grade_name(db: AsyncSession, name: str, exclude_id: str | None = None):
    stmt = select(Grade).where(Grade.name == name)
    if exclude_id:
        stmt = stmt.where(Grade.id != exclude_id)
    if await db.scalar(stmt):
        raise HTTPException(status_code=400, detail=f"Grade {name} already exists")


@router.get("/grades", response_model=list[GradeOut])
async def list_grades(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Grade).order_by(Grade.created_at.desc()))
    return result.scalars().all()


@router.post("/grades", response_model=GradeOut, status_code=status.HTTP_201_CREATED)
async def create_grade(body: GradeIn, db: AsyncSession = Depends(get_db)):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Grade name is required")
    await _check_grade_name(db, name)

    grade = Grade(name=name, badge_url=body.badge_url or None)
    db.add(grade)
    await db.flush()
    logger.info(f"Created grade {grade.name}")
    return grade


@router.put("/grades/{grade_id}", response_model=GradeOut)
async def update_grade(grade_id: str, body: GradeIn, db: AsyncSession = Depends(get_db)):
    grade = await _get_grade(db, grade_id)
    provided = body.model_fields_set

    if "name" in provided:
        name = (body.name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Grade name cannot be empty")
        await _check_grade_name(db, name, exclude_id=grade.id)
        grade.name = name
    if "badge_url" in provided:
        grade.badge_url = body.badge_url or None

    await db.flush()
    logger.info(f"Updated grade {grade.name}")
    return grade


@router.delete("/grades/{grade_id}", response_model=GradeOut)
async def delete_grade(grade_id: str, db: AsyncSession = Depends(get_db)):
    grade = await _get_grade(db, grade_id)
    out = GradeOut.model_validate(grade)
    await db.delete(grade)
    await db.flush()
    logger.info(f"Deleted grade {out.name}")
    return out


# ── Personnel ────────────────────────────────────────────────

async def _get_personnel(db: AsyncSession, personnel_id: str) -> Personnel:
    person = await db.get(Personnel, personnel_id)
    if not person:
        raise HTTPException(status_code=404, detail="Personnel not found")
    return person


def _parse_role(value: str | None):
    role = ROLE_MAP.get((value or "").strip())
    if role is None:
        raise HTTPException(
            status_code=400,
            detail="role must be one of 记录人, 采摘队长, 制茶师",
        )
    return role


@router.get("/personnel", response_model=list[PersonnelOut])
async def list_personnel(
    role: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(Personnel).order_by(Personnel.created_at.desc())
    # Unknown roles list everyone
    role_filter = ROLE_FILTER_MAP.get((role or "").strip())
    if role_filter is not None:
        stmt = stmt.where(Personnel.role == role_filter)
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post("/personnel", response_model=PersonnelOut, status_code=status.HTTP_201_CREATED)
async def create_personnel(body: PersonnelIn, db: AsyncSession = Depends(get_db)):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name is required")

    person = Personnel(
        name=name,
        role=_parse_role(body.role),
        avatar_url=body.avatar_url or None,
        experience_years=clamp_experience(body.experience_years),
    )
    db.add(person)
    await db.flush()
    logger.info(f"Created personnel {person.name} ({person.role.value})")
    return person


@router.put("/personnel/{personnel_id}", response_model=PersonnelOut)
async def update_personnel(
    personnel_id: str,
    body: PersonnelIn,
    db: AsyncSession = Depends(get_db),
):
    person = await _get_personnel(db, personnel_id)
    provided = body.model_fields_set

    if "name" in provided:
        name = (body.name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        person.name = name
    if "role" in provided:
        person.role = _parse_role(body.role)
    if "avatar_url" in provided:
        person.avatar_url = body.avatar_url or None
    if "experience_years" in provided:
        person.experience_years = clamp_experience(body.experience_years)

    await db.flush()
    logger.info(f"Updated personnel {person.name}")
    return person


@router.delete("/personnel/{personnel_id}", response_model=PersonnelOut)
async def delete_personnel(personnel_id: str, db: AsyncSession = Depends(get_db)):
    person = await _get_personnel(db, personnel_id)
    out = PersonnelOut.model_validate(person)
    await db.delete(person)
    await db.flush()
    logger.info(f"Deleted personnel {out.name}")
    return out


# ── Weather templates ────────────────────────────────────────

async def _get_weather_template(db: AsyncSession, template_id: str) -> WeatherTemplate:
    template = await db.get(WeatherTemplate, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Weather template not found")
    return template


async def _check_weather_name(db: AsyncSession, name: str, exclude_id: str | None = None):
    stmt = select(WeatherTemplate).where(WeatherTemplate.name == name)
    if exclude_id:
        stmt = stmt.where(WeatherTemplate.id != exclude_id)
    if await db.scalar(stmt):
        raise HTTPException(status_code=400, detail=f"Weather template {name} already exists")


@router.get("/weather-templates", response_model=list[WeatherTemplateOut])
async def list_weather_templates(
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    stmt = select(WeatherTemplate).order_by(
        WeatherTemplate.sort_order.asc(), WeatherTemplate.created_at.desc()
    )
    if active_only:
        stmt = stmt.where(WeatherTemplate.is_active.is_(True))
    result = await db.execute(stmt)
    return result.scalars().all()


@router.post(
    "/weather-templates",
    response_model=WeatherTemplateOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_weather_template(body: WeatherTemplateIn, db: AsyncSession = Depends(get_db)):
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Weather template name is required")
    await _check_weather_name(db, name)

    template = WeatherTemplate(
        name=name,
        svg_icon=body.svg_icon or "",
        temperature_range=body.temperature_range or None,
        description=body.description or None,
        sort_order=body.sort_order or 0,
        is_active=True if body.is_active is None else body.is_active,
    )
    db.add(template)
    await db.flush()
    logger.info(f"Created weather template {template.name}")
    return template


@router.put("/weather-templates/{template_id}", response_model=WeatherTemplateOut)
async def update_weather_template(
    template_id: str,
    body: WeatherTemplateIn,
    db: AsyncSession = Depends(get_db),
):
    template = await _get_weather_template(db, template_id)
    provided = body.model_fields_set

    if "name" in provided:
        name = (body.name or "").strip()
        if not name:
            raise HTTPException(status_code=400, detail="Weather template name cannot be empty")
        await _check_weather_name(db, name, exclude_id=template.id)
        template.name = name
    if "svg_icon" in provided:
        template.svg_icon = body.svg_icon or ""
    for field in ("temperature_range", "description"):
        if field in provided:
            setattr(template, field, getattr(body, field) or None)
    if "sort_order" in provided:
        template.sort_order = body.sort_order or 0
    if "is_active" in provided and body.is_active is not None:
        template.is_active = body.is_active

    await db.flush()
    logger.info(f"Updated weather template {template.name}")
    return template


@router.delete("/weather-templates/{template_id}", response_model=WeatherTemplateOut)
async def delete_weather_template(template_id: str, db: AsyncSession = Depends(get_db)):
    template = await _get_weather_template(db, template_id)
    out = WeatherTemplateOut.model_validate(template)
    await db.delete(template)
    await db.flush()
    logger.info(f"Deleted weather template {out.name}")
    return out


# ── Adoption plans ───────────────────────────────────────────

def _plan_type(value: str) -> AdoptionPlanType:
    plan_type = PLAN_TYPES.get(value.lower())
    if plan_type is None:
        raise HTTPException(
            status_code=400,
            detail="Plan type must be private, enterprise or b2b",
        )
    return plan_type


@router.get("/adoption-plans/{plan_type}", response_model=AdoptionPlanOut)
async def get_adoption_plan(plan_type: str, db: AsyncSession = Depends(get_db)):
    return await get_or_create_plan(db, _plan_type(plan_type))


@router.put("/adoption-plans/{plan_type}", response_model=AdoptionPlanOut)
async def update_adoption_plan(
    plan_type: str,
    body: AdoptionPlanIn,
    db: AsyncSession = Depends(get_db),
):
    kind = _plan_type(plan_type)
    provided = body.model_dump(exclude_unset=True)
    values = {field: provided[field] for field in PLAN_FIELDS[kind] if field in provided}
    if not values:
        raise HTTPException(
            status_code=400,
            detail=f"No {plan_type.lower()} plan fields to update",
        )

    plan = await upsert_plan(db, kind, values)
    logger.info(f"Updated {kind.value} adoption plan ({', '.join(values)})")
    return plan
