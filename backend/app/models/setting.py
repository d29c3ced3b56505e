import enum
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class SettingCategory(str, enum.Enum):
    general = "general"
    ui = "ui"
    footer = "footer"
    seo = "seo"
    contact = "contact"


class SettingDataType(str, enum.Enum):
    string = "string"
    text = "text"
    url = "url"
    json = "json"


class Setting(Base):
    """Key/value site setting. JSON values are stored serialised in ``value``."""

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, default="")
    description: Mapped[str | None] = mapped_column(Text)
    category: Mapped[SettingCategory] = mapped_column(
        SAEnum(SettingCategory), default=SettingCategory.general
    )
    data_type: Mapped[SettingDataType] = mapped_column(
        SAEnum(SettingDataType), default=SettingDataType.string
    )
    # Public settings may be read by the landing page without a session
    is_public: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
