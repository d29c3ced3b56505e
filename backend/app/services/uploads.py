"""Disk-backed media storage for admin uploads.

Files land in ``{uploads_dir}/{category}/{epoch_ms}-{random}{ext}`` and are
served back from ``/uploads/{category}/{filename}``.
"""

import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import Request, UploadFile

from app.config import settings
from app.middleware.exceptions import BusinessLogicError

logger = logging.getLogger(__name__)

UPLOAD_CATEGORIES = (
    "avatars",
    "personnel",
    "growth",
    "harvest",
    "production",
    "products",
    "landing",
    "monthly",
    "weather",
    "misc",
)
DEFAULT_CATEGORY = "misc"

ALLOWED_MEDIA_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/avif",
    "image/svg+xml",
    "video/mp4",
    "video/webm",
    "video/ogg",
    "video/quicktime",
})
SVG_TYPES = frozenset({"image/svg+xml"})

_CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredUpload:
    filename: str
    original_name: str
    size: int
    mimetype: str
    category: str

    @property
    def url(self) -> str:
        return f"/uploads/{self.category}/{self.filename}"


def uploads_root() -> Path:
    return Path(settings.uploads_dir)


def ensure_upload_dirs() -> None:
    for category in UPLOAD_CATEGORIES:
        (uploads_root() / category).mkdir(parents=True, exist_ok=True)


def resolve_category(category: str | None) -> str:
    """Unknown or missing categories fall back to ``misc``."""
    return category if category in UPLOAD_CATEGORIES else DEFAULT_CATEGORY


def make_filename(original_name: str | None) -> str:
    ext = os.path.splitext(original_name or "")[1]
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


async def save_upload(
    file: UploadFile | None,
    category: str | None,
    allowed_types: frozenset[str] = ALLOWED_MEDIA_TYPES,
) -> StoredUpload:
    """Validate and write an uploaded file.

    Raises:
        BusinessLogicError: no file, a disallowed content type, or a file
            larger than ``settings.max_upload_bytes``.
    """
    if file is None or not file.filename:
        raise BusinessLogicError("No file uploaded", error_code="NO_FILE")

    mimetype = file.content_type or ""
    if mimetype not in allowed_types:
        if allowed_types == SVG_TYPES:
            message = "Only SVG icons are allowed"
        else:
            message = (
                "Only images (JPEG, PNG, GIF, WebP, AVIF, SVG) or videos "
                "(MP4, WebM, OGG, MOV) are allowed"
            )
        raise BusinessLogicError(message, error_code="UNSUPPORTED_FILE_TYPE")

    folder = resolve_category(category)
    target_dir = uploads_root() / folder
    target_dir.mkdir(parents=True, exist_ok=True)

    filename = make_filename(file.filename)
    target = target_dir / filename

    size = 0
    try:
        with target.open("wb") as out:
            while True:
                chunk = await file.read(_CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.max_upload_bytes:
                    raise BusinessLogicError(
                        f"File exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB limit",
                        error_code="FILE_TOO_LARGE",
                    )
                out.write(chunk)
    except BusinessLogicError:
        target.unlink(missing_ok=True)
        raise

    logger.info(f"Stored upload {folder}/{filename} ({size} bytes, {mimetype})")
    return StoredUpload(
        filename=filename,
        original_name=file.filename,
        size=size,
        mimetype=mimetype,
        category=folder,
    )


def public_base_url(request: Request) -> str:
    """``BASE_URL`` when configured, else the scheme and host the client used.

    Honours ``X-Forwarded-Proto`` so links stay https behind a reverse proxy.
    """
    if settings.base_url:
        return settings.base_url.rstrip("/")
    proto = request.headers.get("x-forwarded-proto") or request.url.scheme or "http"
    host = request.headers.get("host") or f"localhost:{settings.port}"
    return f"{proto}://{host}"
