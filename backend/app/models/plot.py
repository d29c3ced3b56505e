import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Plot(Base):
    """A cultivated land unit shown on the landing page."""

    __tablename__ = "plots"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # ["/uploads/landing/1.jpg", "https://cdn.example.com/2.jpg"]
    carousel_images: Mapped[list | None] = mapped_column(JSON, default=list)
    # [{"icon": "🌱", "label": "海拔", "value": "800m"}]
    info_list: Mapped[list | None] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )
