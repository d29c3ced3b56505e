"""One-shot copy of the legacy MongoDB database into PostgreSQL.

Collections are copied one at a time in dependency order.  Each document is
written and committed in its own session, so a bad document is skipped (and
logged) without aborting the rest of the collection.  Rows are matched on
their natural key (username, name, key, date, ...) so the migration can be
re-run; personnel and harvest records get deterministic uuid5 ids derived
from the legacy ``_id`` instead.

Legacy ids of plots, personnel and batches are remembered while migrating so
later collections can re-point their references.
"""

import json
import logging
import math
import uuid

from pymongo import MongoClient
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.middleware.exceptions import ConfigurationError
from app.models.adoption_plan import AdoptionPlan
from app.models.batch import Batch, BatchStatus
from app.models.batch_harvest_record import BatchHarvestRecord
from app.models.grade import Grade
from app.models.growth_log import DailyGrowthLog
from app.models.harvest_record import HarvestRecord
from app.models.monthly_summary import MonthlySummary
from app.models.personnel import Personnel, PersonnelRole
from app.models.plot import Plot
from app.models.setting import Setting, SettingCategory, SettingDataType
from app.models.tea_category import TeaCategory
from app.models.templates import (
    PRODUCTION_STEPS,
    AppreciationTemplate,
    ProductionStepTemplate,
    TitleTemplate,
    WeatherTemplate,
)
from app.models.user import User
from app.services.adoption_plans import PLAN_TYPES
from app.services.growth_logs import normalize_farm_activity_type
from app.services.personnel import clamp_experience
from app.utils.dates import date_key, parse_datetime

logger = logging.getLogger(__name__)

LEGACY_NAMESPACE = uuid.UUID("6c04e2a4-3ce5-4bf4-9252-4e0b3e6f8de4")

LEGACY_ROLES = {
    "记录人": PersonnelRole.RECORDER,
    "采摘队长": PersonnelRole.HARVEST_LEAD,
    "制茶师": PersonnelRole.TEA_MASTER,
}

LEGACY_BATCH_STATUS = {
    "进行中": BatchStatus.IN_PROGRESS,
    "已完成": BatchStatus.COMPLETED,
}

HARVEST_DATE_FIELDS = ("harvest_date", "harvestDate", "date", "harvested_at", "created_at")
HARVEST_WEIGHT_FIELDS = (
    "fresh_leaf_weight_kg",
    "total_weight",
    "total_weight_kg",
    "weight",
    "totalWeight",
    "totalWeightKg",
    "freshLeafWeightKg",
)

TEMPLATE_COLLECTIONS = (
    "production_step_templates",
    "title_templates",
    "appreciation_templates",
    "weather_templates",
)


class SkipDocument(Exception):
    """A legacy document that cannot be migrated; logged and counted."""


def legacy_uuid(legacy_id) -> str:
    return str(uuid.uuid5(LEGACY_NAMESPACE, str(legacy_id)))


def number_or_none(value) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def harvest_weight(doc: dict) -> float:
    """First numeric weight field; non-finite or negative values become 0."""
    for field in HARVEST_WEIGHT_FIELDS:
        value = number_or_none(doc.get(field))
        if value is not None:
            value = float(value)
            return value if math.isfinite(value) and value >= 0 else 0.0
    return 0.0


def harvest_date(doc: dict):
    for field in HARVEST_DATE_FIELDS:
        if doc.get(field):
            return parse_datetime(doc[field])
    return None


def setting_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, default=str)


def setting_category(value) -> SettingCategory:
    try:
        return SettingCategory(str(value).lower())
    except ValueError:
        return SettingCategory.general


def setting_data_type(value) -> SettingDataType:
    try:
        return SettingDataType(str(value).lower())
    except ValueError:
        return SettingDataType.string


def connect_legacy_db(url: str | None):
    """Open the legacy database named in ``url``; returns ``(client, db)``."""
    if not url:
        raise ConfigurationError(
            'OLD_MONGO_URL is not configured; add e.g. '
            'OLD_MONGO_URL="mongodb://localhost:27017/tea-garden" to .env'
        )
    client = MongoClient(url)
    db = client.get_default_database()
    logger.info(f"Connected to legacy MongoDB database {db.name}")
    return client, db


async def _find_one(db: AsyncSession, model, **criteria):
    stmt = select(model)
    for column, value in criteria.items():
        stmt = stmt.where(getattr(model, column) == value)
    return await db.scalar(stmt.limit(1))


async def _find_or_new(db: AsyncSession, model, **criteria):
    row = await _find_one(db, model, **criteria)
    if row is None:
        row = model(**criteria)
        db.add(row)
    return row


class LegacyMigration:
    """Copy every legacy collection, returning ``{collection: {migrated, skipped}}``.

    ``mongo_db`` only needs ``mongo_db[name].find()``; ``session_factory``
    is an ``async_sessionmaker`` for the target database.
    """

    def __init__(self, mongo_db, session_factory: async_sessionmaker):
        self.mongo_db = mongo_db
        self.session_factory = session_factory
        self.plot_ids: dict[str, str] = {}
        self.personnel_ids: dict[str, str] = {}
        self.batch_ids: dict[str, str] = {}

    @property
    def steps(self):
        return (
            ("users", self.migrate_user, None),
            ("personnel", self.migrate_personnel, self.clear_personnel),
            ("grades", self.migrate_grade, self.clear_grades),
            ("production_step_templates", self.migrate_step_template, None),
            ("title_templates", self.migrate_title_template, None),
            ("appreciation_templates", self.migrate_appreciation_template, None),
            ("weather_templates", self.migrate_weather_template, None),
            ("plots", self.migrate_plot, None),
            ("tea_categories", self.migrate_category, None),
            ("settings", self.migrate_setting, None),
            ("adoption_plans", self.migrate_adoption_plan, None),
            ("daily_growth_logs", self.migrate_growth_log, None),
            ("monthly_summaries", self.migrate_monthly_summary, None),
            ("batches", self.migrate_batch, None),
            ("harvest_records", self.migrate_harvest_record, self.clear_harvest_records),
        )

    async def run(self, only: str | None = None) -> dict[str, dict]:
        results = {}
        for collection, handler, clear in self.steps:
            if only == "templates" and collection not in TEMPLATE_COLLECTIONS:
                continue
            if clear is not None:
                async with self.session_factory() as db:
                    await clear(db)
                    await db.commit()
            results[collection] = await self.migrate_collection(collection, handler)
        return results

    async def migrate_collection(self, collection: str, handler) -> dict:
        docs = list(self.mongo_db[collection].find())
        logger.info(f"Migrating {collection}: {len(docs)} document(s)")

        counts = {"migrated": 0, "skipped": 0}
        for doc in docs:
            legacy_id = doc.get("_id")
            async with self.session_factory() as db:
                try:
                    label = await handler(db, doc)
                    await db.commit()
                except SkipDocument as e:
                    await db.rollback()
                    counts["skipped"] += 1
                    logger.warning(f"  skipped {collection} _id={legacy_id}: {e}")
                    continue
                except SQLAlchemyError as e:
                    await db.rollback()
                    counts["skipped"] += 1
                    logger.error(f"  failed {collection} _id={legacy_id}: {e}")
                    continue
                except Exception as e:
                    await db.rollback()
                    counts["skipped"] += 1
                    logger.error(
                        f"  failed {collection} _id={legacy_id}: {e}", exc_info=True
                    )
                    continue
            counts["migrated"] += 1
            logger.info(f"  migrated {label} (legacy _id={legacy_id})")

        logger.info(
            f"Finished {collection}: {counts['migrated']} migrated, {counts['skipped']} skipped"
        )
        return counts

    # ── Clearing ─────────────────────────────────────────────

    async def clear_personnel(self, db: AsyncSession):
        logger.info("Clearing existing personnel")
        await db.execute(delete(Personnel))

    async def clear_grades(self, db: AsyncSession):
        logger.info("Clearing existing grades")
        await db.execute(delete(Grade))

    async def clear_harvest_records(self, db: AsyncSession):
        logger.info("Clearing existing harvest records and batch links")
        await db.execute(delete(BatchHarvestRecord))
        await db.execute(delete(HarvestRecord))

    # ── Accounts and reference data ──────────────────────────

    async def migrate_user(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("username") or not doc.get("password"):
            raise SkipDocument("username and password are required")
        user = await _find_or_new(db, User, username=doc["username"])
        # Legacy passwords are already bcrypt hashes
        user.password_hash = doc["password"]
        user.reset_password_token = doc.get("resetPasswordToken")
        user.reset_password_expires = parse_datetime(doc.get("resetPasswordExpires"))
        return f"user {user.username}"

    async def migrate_personnel(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("name") or not doc.get("role"):
            raise SkipDocument("name and role are required")
        role = LEGACY_ROLES.get(str(doc["role"]))
        if role is None:
            raise SkipDocument(f"unknown role {doc['role']!r}")

        person_id = legacy_uuid(doc["_id"])
        person = await db.get(Personnel, person_id)
        if person is None:
            person = Personnel(id=person_id)
            db.add(person)
        person.name = doc["name"]
        person.role = role
        person.avatar_url = doc.get("avatar_url") or ""
        person.experience_years = clamp_experience(number_or_none(doc.get("experience_years")))

        self.personnel_ids[str(doc["_id"])] = person_id
        return f"personnel {person.name} ({role.value})"

    async def migrate_grade(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("name"):
            raise SkipDocument("name is required")
        grade = await _find_or_new(db, Grade, name=doc["name"])
        grade.badge_url = doc.get("badge_url") or ""
        return f"grade {grade.name}"

    # ── Templates ────────────────────────────────────────────

    async def migrate_step_template(self, db: AsyncSession, doc: dict) -> str:
        step_name = doc.get("step_name")
        if step_name not in PRODUCTION_STEPS:
            raise SkipDocument(f"invalid step_name {step_name!r}")
        blank = {"purpose": "", "method": "", "sensory_change": "", "value": ""}
        template = await _find_or_new(db, ProductionStepTemplate, step_name=step_name)
        template.manual_craft = doc.get("manual_craft") or dict(blank)
        template.modern_craft = doc.get("modern_craft") or dict(blank)
        return f"step template {step_name}"

    async def migrate_title_template(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("category_name") or not doc.get("title_template"):
            raise SkipDocument("category_name and title_template are required")
        template = await _find_or_new(db, TitleTemplate, category_name=doc["category_name"])
        template.title_template = doc["title_template"]
        return f"title template {template.category_name}"

    async def migrate_appreciation_template(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("category_name"):
            raise SkipDocument("category_name is required")
        template = await _find_or_new(
            db, AppreciationTemplate, category_name=doc["category_name"]
        )
        template.tasting_notes = doc.get("tasting_notes") or ""
        template.brewing_suggestion = doc.get("brewing_suggestion") or ""
        template.storage_method = doc.get("storage_method") or ""
        return f"appreciation template {template.category_name}"

    async def migrate_weather_template(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("name"):
            raise SkipDocument("name is required")
        template = await _find_or_new(db, WeatherTemplate, name=doc["name"])
        template.svg_icon = doc.get("svg_icon") or ""
        template.temperature_range = doc.get("temperature_range") or ""
        template.description = doc.get("description") or ""
        sort_order = number_or_none(doc.get("sort_order"))
        template.sort_order = int(sort_order) if sort_order is not None else 0
        is_active = doc.get("is_active")
        template.is_active = is_active if isinstance(is_active, bool) else True
        return f"weather template {template.name}"

    # ── Landing content ──────────────────────────────────────

    async def migrate_plot(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("name"):
            raise SkipDocument("name is required")
        plot = await _find_or_new(db, Plot, name=doc["name"])
        images = doc.get("carousel_images")
        plot.carousel_images = images if isinstance(images, list) else []
        plot.info_list = doc.get("info_list") or []
        await db.flush()

        self.plot_ids[str(doc["_id"])] = plot.id
        return f"plot {plot.name}"

    async def migrate_category(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("name") or not doc.get("slug"):
            raise SkipDocument("name and slug are required")
        category = await _find_or_new(db, TeaCategory, name=doc["name"])
        category.slug = doc["slug"]
        category.image_url = doc.get("image_url")
        category.description = doc.get("description")
        category.yield_percentage = number_or_none(doc.get("yield_percentage")) or 0
        category.picking_period = doc.get("picking_period")
        category.picking_start_date = parse_datetime(doc.get("picking_start_date"))
        category.picking_end_date = parse_datetime(doc.get("picking_end_date"))
        sort_order = doc.get("sort_order")
        category.sort_order = (
            sort_order if isinstance(sort_order, int) and not isinstance(sort_order, bool) else 999
        )
        return f"category {category.name}"

    async def migrate_setting(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("key"):
            raise SkipDocument("key is required")
        setting = await _find_or_new(db, Setting, key=doc["key"])
        setting.value = setting_value(doc.get("value"))
        setting.description = doc.get("description")
        setting.category = setting_category(doc.get("category"))
        setting.data_type = setting_data_type(doc.get("data_type"))
        is_public = doc.get("is_public")
        setting.is_public = is_public if isinstance(is_public, bool) else False
        return f"setting {setting.key}"

    async def migrate_adoption_plan(self, db: AsyncSession, doc: dict) -> str:
        plan_type = PLAN_TYPES.get(str(doc.get("type") or "").lower())
        if plan_type is None:
            raise SkipDocument(f"unknown plan type {doc.get('type')!r}")
        plan = await _find_or_new(db, AdoptionPlan, type=plan_type)
        for field in (
            "marketing_header",
            "value_propositions",
            "customer_cases",
            "scenario_applications",
            "packages",
            "comparison_package_names",
            "comparison_features",
            "process_steps",
            "use_scenarios",
            "service_contents",
            "description",
        ):
            setattr(plan, field, doc.get(field))
        return f"adoption plan {plan_type.value}"

    # ── Growth observation ───────────────────────────────────

    async def migrate_growth_log(self, db: AsyncSession, doc: dict) -> str:
        day = parse_datetime(doc.get("date"))
        if day is None:
            raise SkipDocument("date is required")
        log = await _find_or_new(db, DailyGrowthLog, date=day)
        log.plot_id = self.plot_ids.get(str(doc.get("plot_id")))
        log.recorder_id = self.personnel_ids.get(str(doc.get("recorder_id")))
        log.recorder_name = doc.get("recorder_name")
        log.farm_activity_type = normalize_farm_activity_type(doc.get("farm_activity_type"))
        log.harvest_weight_kg = number_or_none(doc.get("harvest_weight_kg")) or 0
        for field in (
            "main_image_url",
            "status_tag",
            "weather",
            "summary",
            "detail_gallery",
            "photo_info",
            "environment_data",
            "full_log",
            "farm_activity_log",
            "phenological_observation",
            "abnormal_event",
        ):
            setattr(log, field, doc.get(field))
        return f"growth log {date_key(day)}"

    async def migrate_monthly_summary(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("year_month"):
            raise SkipDocument("year_month is required")
        summary = await _find_or_new(db, MonthlySummary, year_month=doc["year_month"])
        summary.plot_id = self.plot_ids.get(str(doc.get("plot_id")))
        for field in (
            "detail_gallery",
            "harvest_stats",
            "farm_calendar",
            "abnormal_summary",
            "climate_summary",
            "next_month_plan",
        ):
            setattr(summary, field, doc.get(field))
        return f"monthly summary {summary.year_month}"

    # ── Production ───────────────────────────────────────────

    async def migrate_batch(self, db: AsyncSession, doc: dict) -> str:
        if not doc.get("batch_number") or not doc.get("category_name"):
            raise SkipDocument("batch_number and category_name are required")
        batch = await _find_or_new(db, Batch, batch_number=doc["batch_number"])
        batch.category_name = doc["category_name"]
        batch.tea_master = doc.get("tea_master")
        batch.tea_master_id = self.personnel_ids.get(str(doc.get("tea_master_id")))

        grade_name = doc.get("grade") or None
        grade = await _find_one(db, Grade, name=grade_name) if grade_name else None
        batch.grade = grade_name
        batch.grade_id = grade.id if grade else None

        batch.status = LEGACY_BATCH_STATUS.get(
            str(doc.get("status") or ""), BatchStatus.PUBLISHED
        )
        production_date = parse_datetime(doc.get("production_date"))
        if production_date is not None:
            batch.production_date = production_date
        batch.final_product_weight_kg = number_or_none(doc.get("final_product_weight_kg"))
        for field in (
            "production_steps",
            "tasting_report",
            "product_appreciation",
            "cover_image_url",
            "detail_cover_image_url",
            "images_and_videos",
            "notes",
            "detail_title",
        ):
            setattr(batch, field, doc.get(field))
        await db.flush()

        self.batch_ids[str(doc["_id"])] = batch.id
        return f"batch {batch.batch_number}"

    async def migrate_harvest_record(self, db: AsyncSession, doc: dict) -> str:
        day = harvest_date(doc)
        if day is None:
            raise SkipDocument("no parseable harvest date")

        record_id = legacy_uuid(doc["_id"])
        record = await db.get(HarvestRecord, record_id)
        if record is None:
            record = HarvestRecord(id=record_id)
            db.add(record)

        category_name = doc.get("category_name")
        category = await _find_one(db, TeaCategory, name=category_name) if category_name else None

        record.harvest_date = day
        record.fresh_leaf_weight_kg = harvest_weight(doc)
        record.weather = doc.get("weather")
        record.images_and_videos = doc.get("images_and_videos")
        record.media_urls = doc.get("media_urls")
        record.harvest_team = doc.get("harvest_team")
        record.harvest_team_id = self.personnel_ids.get(str(doc.get("harvest_team_id")))
        record.assigned_batch_id = self.batch_ids.get(str(doc.get("assigned_batch_id")))
        record.category_id = category.id if category else None
        record.category_name = category_name
        record.notes = doc.get("notes")
        await db.flush()

        if record.assigned_batch_id:
            link = await db.get(BatchHarvestRecord, (record.assigned_batch_id, record.id))
            if link is None:
                db.add(
                    BatchHarvestRecord(
                        batch_id=record.assigned_batch_id, harvest_record_id=record.id
                    )
                )

        return f"harvest record {date_key(day)} {record.fresh_leaf_weight_kg}kg"
