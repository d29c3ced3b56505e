"""Date helpers shared by routers and services.

All datetimes in the database are naive UTC.  Month and day windows are
inclusive and run from 00:00:00 to 23:59:59.999.
"""

import calendar
import re
from datetime import date, datetime, timedelta, timezone

MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
# Stricter form accepted by the public API
PUBLIC_MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value) -> datetime | None:
    """Accept a datetime, a date, or an ISO-8601 string (``Z`` allowed)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return to_naive_utc(datetime.fromisoformat(text))
        except ValueError:
            return None
    return None


def month_range(month: str) -> tuple[datetime, datetime]:
    """``"2024-04"`` → (2024-04-01 00:00, 2024-04-30 23:59:59.999).

    Raises ValueError for anything that is not a valid ``YYYY-MM``.
    """
    if not MONTH_RE.match(month or ""):
        raise ValueError(f"Invalid month: {month!r}")
    year, month_num = int(month[:4]), int(month[5:])
    if not 1 <= month_num <= 12:
        raise ValueError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(year, month_num)[1]
    return (
        datetime(year, month_num, 1),
        datetime(year, month_num, last_day, 23, 59, 59, 999000),
    )


def day_range(value: datetime) -> tuple[datetime, datetime]:
    start = datetime(value.year, value.month, value.day)
    return start, start + timedelta(days=1) - timedelta(milliseconds=1)


def date_key(value: datetime) -> str:
    """``YYYY-MM-DD`` for grouping by calendar day."""
    return value.strftime("%Y-%m-%d")


def month_day_label(value: datetime) -> str:
    """``4月5日`` (no zero padding)."""
    return f"{value.month}月{value.day}日"


def slash_date(value: datetime) -> str:
    """``2024/4/5`` (no zero padding)."""
    return f"{value.year}/{value.month}/{value.day}"
