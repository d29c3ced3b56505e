"""Reusable Pydantic field types and validators.

- NaiveDatetime: ISO-8601 datetime or date string, stored as naive UTC
- is_absolute_url: absolute http(s) URL check used by settings and plots
"""

import re
from datetime import datetime
from typing import Annotated, Any

from pydantic import BeforeValidator

from app.utils.dates import parse_datetime

URL_REGEX = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://[^\s/?#]+\S*$")


def _coerce_datetime(value: Any) -> datetime | None:
    """Parse request datetimes.

    Accepts ``2024-04-05``, ``2024-04-05T08:00:00`` and timezone-aware
    forms such as ``2024-04-05T00:00:00.000Z``; aware values are converted
    to naive UTC.
    """
    if value is None or value == "":
        return None
    parsed = parse_datetime(value)
    if parsed is None:
        raise ValueError("Invalid datetime format")
    return parsed


NaiveDatetime = Annotated[datetime, BeforeValidator(_coerce_datetime)]


def is_absolute_url(value: str | None) -> bool:
    """True for a URL with a scheme and host (``https://cdn/x.jpg``)."""
    if not value or not isinstance(value, str):
        return False
    return bool(URL_REGEX.match(value.strip()))


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None
