from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Collection, Optional

from ..common.datetime_utils import is_weekend, normalize_date_key, normalize_instant, today_date_key
from .factory import StatusStrategyChain
from .model import ComputedAttendance
from .strategies.base import DayContext

_DATE_FIELDS = ("work_date", "date")
_CHECK_IN_FIELDS = ("check_in_at", "checkInAt")
_CHECK_OUT_FIELDS = ("check_out_at", "checkOutAt")
_OT_FIELDS = ("ot_approved", "otApproved")

_SCALARS = (str, bytes, int, float, bool)

_DEFAULT_CHAIN = StatusStrategyChain()


def _read(record: Any, names: tuple[str, ...]) -> tuple[bool, Any]:
    if isinstance(record, Mapping):
        for name in names:
            if name in record:
                return True, record[name]
        return False, None
    for name in names:
        if hasattr(record, name):
            return True, getattr(record, name)
    return False, None


def build_day_context(
    record: Any,
    holiday_dates: Optional[Collection[str]] = None,
    leave_dates: Optional[Collection[str]] = None,
    *,
    today: Optional[str] = None,
) -> DayContext:
    """Normalize a record (entity, ``DayInput`` or mapping) for the strategies."""
    if record is None or isinstance(record, _SCALARS):
        return DayContext(valid=False)

    found, raw_date = _read(record, _DATE_FIELDS)
    date_key = normalize_date_key(raw_date) if found else None
    if date_key is None:
        return DayContext(valid=False)

    punches = []
    for names in (_CHECK_IN_FIELDS, _CHECK_OUT_FIELDS):
        _, raw = _read(record, names)
        if raw is None:
            punches.append(None)
            continue
        instant = normalize_instant(raw)
        if instant is None:
            return DayContext(valid=False, date_key=date_key)
        punches.append(instant)
    check_in_at, check_out_at = punches

    _, ot_approved = _read(record, _OT_FIELDS)
    holidays = holiday_dates or ()
    leaves = leave_dates or ()
    today_key = today or today_date_key()

    return DayContext(
        valid=True,
        date_key=date_key,
        check_in_at=check_in_at,
        check_out_at=check_out_at,
        ot_approved=bool(ot_approved),
        is_non_working_day=bool(is_weekend(date_key)) or date_key in holidays,
        is_leave=date_key in leaves,
        is_today=date_key == today_key,
        is_past=date_key < today_key,
    )


def compute_attendance(
    record: Any,
    holiday_dates: Optional[Collection[str]] = None,
    leave_dates: Optional[Collection[str]] = None,
    *,
    today: Optional[str] = None,
    chain: Optional[StatusStrategyChain] = None,
) -> ComputedAttendance:
    """Derive status and minute counts for one day.

    ``record`` may be an ``AttendanceRecord``, a ``DayInput`` (for days with
    no stored record) or a mapping using either snake_case or camelCase keys.
    ``today`` is the UTC+7 date key treated as "today"; it defaults to the
    current date.
    """
    ctx = build_day_context(record, holiday_dates, leave_dates, today=today)
    return (chain or _DEFAULT_CHAIN).evaluate(ctx)
