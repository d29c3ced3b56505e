import enum
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum as SAEnum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class PersonnelRole(str, enum.Enum):
    RECORDER = "RECORDER"
    HARVEST_LEAD = "HARVEST_LEAD"
    TEA_MASTER = "TEA_MASTER"


class Personnel(Base):
    """Garden staff referenced by growth logs, harvest records and batches."""

    __tablename__ = "personnel"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    role: Mapped[PersonnelRole] = mapped_column(SAEnum(PersonnelRole), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    experience_years: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
