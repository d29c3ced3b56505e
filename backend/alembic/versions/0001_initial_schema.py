"""Initial schema: accounts, reference data, growth logs, harvests, batches, content.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-17

Run with:
    alembic upgrade head
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

from alembic import op
import sqlalchemy as sa

personnel_role = sa.Enum("RECORDER", "HARVEST_LEAD", "TEA_MASTER", name="personnelrole")
farm_activity_type = sa.Enum(
    "NONE", "FERTILIZE", "PRUNE", "IRRIGATE", "HARVEST", "ABNORMAL", name="farmactivitytype"
)
batch_status = sa.Enum("IN_PROGRESS", "COMPLETED", "PUBLISHED", name="batchstatus")
adoption_plan_type = sa.Enum("PRIVATE", "ENTERPRISE", "B2B", name="adoptionplantype")
setting_category = sa.Enum("general", "ui", "footer", "seo", "contact", name="settingcategory")
setting_data_type = sa.Enum("string", "text", "url", "json", name="settingdatatype")


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ── Accounts ─────────────────────────────────────────────

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("reset_password_token", sa.String(255)),
        sa.Column("reset_password_expires", sa.DateTime()),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"])

    # ── Reference data ───────────────────────────────────────

    op.create_table(
        "tea_categories",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("slug", sa.String(150), nullable=False, unique=True),
        sa.Column("image_url", sa.String(500)),
        sa.Column("description", sa.Text()),
        sa.Column("yield_percentage", sa.Float(), server_default="0"),
        sa.Column("picking_period", sa.String(50)),
        sa.Column("picking_start_date", sa.DateTime()),
        sa.Column("picking_end_date", sa.DateTime()),
        sa.Column("sort_order", sa.Integer(), server_default="999"),
        *_timestamps(),
    )
    op.create_index("ix_tea_categories_slug", "tea_categories", ["slug"])

    op.create_table(
        "plots",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("carousel_images", sa.JSON()),
        sa.Column("info_list", sa.JSON()),
        *_timestamps(),
    )

    op.create_table(
        "personnel",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("role", personnel_role, nullable=False),
        sa.Column("avatar_url", sa.String(500)),
        sa.Column("experience_years", sa.Integer(), server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_personnel_name", "personnel", ["name"])

    op.create_table(
        "grades",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("badge_url", sa.String(500)),
        *_timestamps(),
    )

    # ── Growth observation ───────────────────────────────────

    op.create_table(
        "daily_growth_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("date", sa.DateTime(), nullable=False, unique=True),
        sa.Column("plot_id", sa.String(36), sa.ForeignKey("plots.id", ondelete="SET NULL")),
        sa.Column(
            "recorder_id", sa.String(36), sa.ForeignKey("personnel.id", ondelete="SET NULL")
        ),
        sa.Column("recorder_name", sa.String(100)),
        sa.Column("main_image_url", sa.String(500)),
        sa.Column("status_tag", sa.JSON()),
        sa.Column("weather", sa.JSON()),
        sa.Column("detail_gallery", sa.JSON()),
        sa.Column("photo_info", sa.JSON()),
        sa.Column("environment_data", sa.JSON()),
        sa.Column("abnormal_event", sa.JSON()),
        sa.Column("summary", sa.Text()),
        sa.Column("full_log", sa.Text()),
        sa.Column("farm_activity_type", farm_activity_type, server_default="NONE"),
        sa.Column("farm_activity_log", sa.Text()),
        sa.Column("phenological_observation", sa.Text()),
        sa.Column("harvest_weight_kg", sa.Float(), server_default="0"),
        *_timestamps(),
    )
    op.create_index("ix_daily_growth_logs_plot_id", "daily_growth_logs", ["plot_id"])
    op.create_index("ix_daily_growth_logs_recorder_id", "daily_growth_logs", ["recorder_id"])

    op.create_table(
        "monthly_summaries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("year_month", sa.String(7), nullable=False, unique=True),
        sa.Column("plot_id", sa.String(36), sa.ForeignKey("plots.id", ondelete="SET NULL")),
        sa.Column("detail_gallery", sa.JSON()),
        sa.Column("harvest_stats", sa.JSON()),
        sa.Column("abnormal_summary", sa.JSON()),
        sa.Column("climate_summary", sa.JSON()),
        sa.Column("farm_calendar", sa.Text()),
        sa.Column("next_month_plan", sa.JSON()),
        *_timestamps(),
    )

    # ── Harvest and production ───────────────────────────────

    op.create_table(
        "batches",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("batch_number", sa.String(100), nullable=False, unique=True),
        sa.Column("category_name", sa.String(100), nullable=False),
        sa.Column("tea_master", sa.JSON()),
        sa.Column(
            "tea_master_id", sa.String(36), sa.ForeignKey("personnel.id", ondelete="SET NULL")
        ),
        sa.Column("production_steps", sa.JSON()),
        sa.Column("tasting_report", sa.JSON()),
        sa.Column("product_appreciation", sa.JSON()),
        sa.Column("final_product_weight_kg", sa.Float()),
        sa.Column("grade", sa.String(100)),
        sa.Column("grade_id", sa.String(36), sa.ForeignKey("grades.id", ondelete="SET NULL")),
        sa.Column("production_date", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("status", batch_status, server_default="IN_PROGRESS"),
        sa.Column("cover_image_url", sa.String(500)),
        sa.Column("detail_cover_image_url", sa.String(500)),
        sa.Column("images_and_videos", sa.JSON()),
        sa.Column("notes", sa.Text()),
        sa.Column("detail_title", sa.String(255)),
        *_timestamps(),
    )
    op.create_index("ix_batches_batch_number", "batches", ["batch_number"])
    op.create_index("ix_batches_category_name", "batches", ["category_name"])
    op.create_index("ix_batches_production_date", "batches", ["production_date"])
    op.create_index("ix_batches_status", "batches", ["status"])

    op.create_table(
        "harvest_records",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("harvest_date", sa.DateTime(), nullable=False),
        sa.Column("fresh_leaf_weight_kg", sa.Float(), server_default="0"),
        sa.Column("weather", sa.JSON()),
        sa.Column("images_and_videos", sa.JSON()),
        sa.Column("media_urls", sa.JSON()),
        sa.Column("harvest_team", sa.JSON()),
        sa.Column(
            "harvest_team_id", sa.String(36), sa.ForeignKey("personnel.id", ondelete="SET NULL")
        ),
        sa.Column(
            "category_id", sa.String(36), sa.ForeignKey("tea_categories.id", ondelete="SET NULL")
        ),
        sa.Column("category_name", sa.String(100)),
        sa.Column(
            "assigned_batch_id", sa.String(36), sa.ForeignKey("batches.id", ondelete="SET NULL")
        ),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_harvest_records_harvest_date", "harvest_records", ["harvest_date"])
    op.create_index("ix_harvest_records_harvest_team_id", "harvest_records", ["harvest_team_id"])
    op.create_index("ix_harvest_records_category_id", "harvest_records", ["category_id"])
    op.create_index(
        "ix_harvest_records_assigned_batch_id", "harvest_records", ["assigned_batch_id"]
    )

    op.create_table(
        "batch_harvest_records",
        sa.Column(
            "batch_id",
            sa.String(36),
            sa.ForeignKey("batches.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "harvest_record_id",
            sa.String(36),
            sa.ForeignKey("harvest_records.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("notes", sa.Text()),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    # ── Content ──────────────────────────────────────────────

    op.create_table(
        "adoption_plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("type", adoption_plan_type, nullable=False, unique=True),
        sa.Column("marketing_header", sa.JSON()),
        sa.Column("value_propositions", sa.JSON()),
        sa.Column("customer_cases", sa.JSON()),
        sa.Column("scenario_applications", sa.JSON()),
        sa.Column("packages", sa.JSON()),
        sa.Column("comparison_package_names", sa.JSON()),
        sa.Column("comparison_features", sa.JSON()),
        sa.Column("use_scenarios", sa.JSON()),
        sa.Column("service_contents", sa.JSON()),
        sa.Column("process_steps", sa.JSON()),
        sa.Column("description", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "production_step_templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("step_name", sa.String(20), nullable=False, unique=True),
        sa.Column("manual_craft", sa.JSON()),
        sa.Column("modern_craft", sa.JSON()),
        *_timestamps(),
    )

    op.create_table(
        "title_templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("category_name", sa.String(100), nullable=False, unique=True),
        sa.Column("title_template", sa.String(255), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "appreciation_templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("category_name", sa.String(100), nullable=False, unique=True),
        sa.Column("tasting_notes", sa.Text(), server_default=""),
        sa.Column("brewing_suggestion", sa.Text(), server_default=""),
        sa.Column("storage_method", sa.Text(), server_default=""),
        *_timestamps(),
    )

    op.create_table(
        "weather_templates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(50), nullable=False, unique=True),
        sa.Column("svg_icon", sa.Text(), server_default=""),
        sa.Column("temperature_range", sa.String(50)),
        sa.Column("description", sa.Text()),
        sa.Column("sort_order", sa.Integer(), server_default="0"),
        sa.Column("is_active", sa.Boolean(), server_default="true"),
        *_timestamps(),
    )

    op.create_table(
        "settings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("key", sa.String(100), nullable=False, unique=True),
        sa.Column("value", sa.Text(), nullable=False, server_default=""),
        sa.Column("description", sa.Text()),
        sa.Column("category", setting_category, server_default="general"),
        sa.Column("data_type", setting_data_type, server_default="string"),
        sa.Column("is_public", sa.Boolean(), server_default="false"),
        *_timestamps(),
    )


def downgrade() -> None:
    for table in (
        "settings",
        "weather_templates",
        "appreciation_templates",
        "title_templates",
        "production_step_templates",
        "adoption_plans",
        "batch_harvest_records",
        "harvest_records",
        "batches",
        "monthly_summaries",
        "daily_growth_logs",
        "grades",
        "personnel",
        "plots",
        "tea_categories",
        "users",
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (
        setting_data_type,
        setting_category,
        adoption_plan_type,
        batch_status,
        farm_activity_type,
        personnel_role,
    ):
        enum.drop(bind, checkfirst=True)
