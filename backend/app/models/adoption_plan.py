"""Adoption plans: marketing content for the "adopt a tea tree" offers.

There is exactly one row per plan type.  Each type only uses a subset of
the columns:

    PRIVATE     marketing_header, value_propositions, customer_cases,
                scenario_applications, packages, comparison_package_names,
                comparison_features, process_steps
    ENTERPRISE  marketing_header, customer_cases, use_scenarios,
                service_contents, process_steps
    B2B         description
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class AdoptionPlanType(str, enum.Enum):
    PRIVATE = "PRIVATE"
    ENTERPRISE = "ENTERPRISE"
    B2B = "B2B"


class AdoptionPlan(Base):
    __tablename__ = "adoption_plans"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    type: Mapped[AdoptionPlanType] = mapped_column(
        SAEnum(AdoptionPlanType), unique=True, nullable=False
    )

    # ── Private / enterprise ─────────────────────────────────
    # {"title": "...", "subtitle": "...", "description": "..."}
    marketing_header: Mapped[dict | None] = mapped_column(JSON)
    value_propositions: Mapped[list | None] = mapped_column(JSON)
    customer_cases: Mapped[list | None] = mapped_column(JSON)
    scenario_applications: Mapped[list | None] = mapped_column(JSON)
    packages: Mapped[list | None] = mapped_column(JSON)
    comparison_package_names: Mapped[list | None] = mapped_column(JSON)
    comparison_features: Mapped[list | None] = mapped_column(JSON)
    use_scenarios: Mapped[list | None] = mapped_column(JSON)
    service_contents: Mapped[list | None] = mapped_column(JSON)
    process_steps: Mapped[list | None] = mapped_column(JSON)

    # ── B2B ──────────────────────────────────────────────────
    description: Mapped[str | None] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
