"""Fixed-offset (UTC+7) calendar and clock helpers.

Every date key in the system is a ``YYYY-MM-DD`` string for a calendar day in
the organization's offset, regardless of the server's local time zone.
Instants are timezone-aware UTC datetimes; naive datetimes (as returned by
MySQL DATETIME columns) are treated as UTC.

These helpers never raise on malformed input: they return ``None`` so the
status engine can fail safe into ``UNKNOWN``. The only exception is
:func:`validate_month`, which belongs to the input-validation layer.
"""

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from ..core.constants import ORG_UTC_OFFSET_HOURS
from ..core.exceptions import ValidationError

ORG_TZ = timezone(timedelta(hours=ORG_UTC_OFFSET_HOURS))

_DATE_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
_ONE_MINUTE = timedelta(minutes=1)


def now_utc() -> datetime:
    """Current instant.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def normalize_instant(value: Any) -> Optional[datetime]:
    """Coerce a datetime or ISO-8601 string into an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return normalize_instant(parsed)
    return None


def parse_date_key(value: Any) -> Optional[date]:
    """Parse a ``YYYY-MM-DD`` key into a date; ``None`` for anything invalid.

    Values that would roll over (``2026-02-30``) are rejected.
    """
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def is_valid_date_key(value: Any) -> bool:
    return isinstance(value, str) and parse_date_key(value) is not None


def to_date_key(instant: Any) -> Optional[str]:
    """Date key of an instant as seen in the organization's offset."""
    moment = normalize_instant(instant)
    if moment is None:
        return None
    return moment.astimezone(ORG_TZ).strftime("%Y-%m-%d")


def normalize_date_key(value: Any) -> Optional[str]:
    """Accept a date key, a ``date``, a datetime or an ISO timestamp string."""
    if isinstance(value, datetime):
        return to_date_key(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        if "T" in text:
            return to_date_key(text)
        return text if is_valid_date_key(text) else None
    return None


def today_date_key(now: Optional[datetime] = None) -> str:
    return to_date_key(now or now_utc())


def is_today(date_key: str, now: Optional[datetime] = None) -> bool:
    return is_valid_date_key(date_key) and date_key == today_date_key(now)


def is_weekend(date_key: str) -> Optional[bool]:
    """Saturday or Sunday; ``None`` when the key is invalid."""
    day = parse_date_key(date_key)
    if day is None:
        return None
    return day.weekday() >= 5


def time_on_date(date_key: str, hour: int, minute: int) -> Optional[datetime]:
    """Instant (UTC) of wall-clock ``hour:minute`` on ``date_key`` in UTC+7."""
    day = parse_date_key(date_key)
    if day is None or not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=ORG_TZ)
    return local.astimezone(timezone.utc)


def minutes_diff(start: Any, end: Any) -> Optional[int]:
    """Whole minutes from ``start`` to ``end`` (floored, may be negative)."""
    a = normalize_instant(start)
    b = normalize_instant(end)
    if a is None or b is None:
        return None
    return (b - a) // _ONE_MINUTE


def date_keys_between(start_key: str, end_key: str) -> list[str]:
    """All date keys from ``start_key`` to ``end_key`` inclusive."""
    start = parse_date_key(start_key)
    end = parse_date_key(end_key)
    if start is None or end is None or end < start:
        return []
    days = (end - start).days
    return [(start + timedelta(days=i)).isoformat() for i in range(days + 1)]


def validate_month(value: Any) -> str:
    """Validate a ``YYYY-MM`` month string (01-12) and return it trimmed."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Month is required")
    month = value.strip()
    if not _MONTH_RE.match(month):
        raise ValidationError("Month must be in YYYY-MM format (e.g., 2026-01)")
    if not 1 <= int(month[5:7]) <= 12:
        raise ValidationError("Month must be between 01 and 12")
    return month


def month_date_keys(month: str) -> list[str]:
    month = validate_month(month)
    year, month_num = int(month[:4]), int(month[5:7])
    last_day = calendar.monthrange(year, month_num)[1]
    return date_keys_between(f"{month}-01", f"{month}-{last_day:02d}")


def month_of(date_key: str) -> Optional[str]:
    return date_key[:7] if is_valid_date_key(date_key) else None
