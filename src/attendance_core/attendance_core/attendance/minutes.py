"""Minute arithmetic for a session, anchored to the record's date key.

All thresholds are wall-clock times in UTC+7 on the session's calendar date,
so a cross-midnight checkout is measured against the check-in day.
"""

from __future__ import annotations

from datetime import datetime

from ..common.datetime_utils import minutes_diff, time_on_date
from ..core.constants import LATE_THRESHOLD, LUNCH_END, LUNCH_MINUTES, LUNCH_START, OT_THRESHOLD, SHIFT_END


def compute_late_minutes(date_key: str, check_in_at: datetime) -> int:
    """Minutes past 08:45; zero when checked in at or before 08:45."""
    threshold = time_on_date(date_key, *LATE_THRESHOLD)
    if check_in_at <= threshold:
        return 0
    return minutes_diff(threshold, check_in_at)


def compute_work_minutes(date_key: str, check_in_at: datetime, check_out_at: datetime, *, ot_approved: bool) -> int:
    """Elapsed minutes minus lunch, never negative.

    Without OT approval the checkout is capped at 17:30 first. Lunch (60 min)
    is deducted only when check-in is before 12:00 and the effective checkout
    is after 13:00.
    """
    effective_out = check_out_at
    if not ot_approved:
        effective_out = min(check_out_at, time_on_date(date_key, *SHIFT_END))

    if effective_out <= check_in_at:
        return 0

    total = minutes_diff(check_in_at, effective_out)

    lunch_start = time_on_date(date_key, *LUNCH_START)
    lunch_end = time_on_date(date_key, *LUNCH_END)
    if check_in_at < lunch_start and effective_out > lunch_end:
        total -= LUNCH_MINUTES

    return max(0, total)


def compute_potential_ot_minutes(date_key: str, check_out_at: datetime) -> int:
    """Minutes past 17:31 regardless of approval (reporting only)."""
    threshold = time_on_date(date_key, *OT_THRESHOLD)
    return max(0, minutes_diff(threshold, check_out_at))


def compute_ot_minutes(date_key: str, check_out_at: datetime, *, ot_approved: bool) -> int:
    if not ot_approved:
        return 0
    return compute_potential_ot_minutes(date_key, check_out_at)


def is_early_leave(date_key: str, check_out_at: datetime) -> bool:
    return check_out_at < time_on_date(date_key, *SHIFT_END)
