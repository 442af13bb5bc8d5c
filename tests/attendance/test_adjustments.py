from datetime import timedelta

import pytest

from src.attendance_core.attendance_core.attendance.adjustments import validate_adjustment_window
from src.attendance_core.attendance_core.common.datetime_utils import time_on_date
from src.attendance_core.attendance_core.common.grace_config import GraceConfig
from src.attendance_core.attendance_core.core.exceptions import ValidationError


def _validate(check_in, check_out=None, *, now, grace=None):
    validate_adjustment_window(
        anchor_check_in=check_in,
        requested_check_out=check_out,
        now=now,
        grace=grace or GraceConfig(),
    )


def test_accepts_completed_session_within_limits(fixed_now):
    _validate(time_on_date("2026-01-13", 8, 30), time_on_date("2026-01-13", 17, 30), now=fixed_now)


def test_nothing_to_validate_without_anchor(fixed_now):
    _validate(None, now=fixed_now)


def test_check_out_requires_anchor(fixed_now):
    with pytest.raises(ValidationError, match="without check-in reference"):
        _validate(None, time_on_date("2026-01-13", 17, 30), now=fixed_now)


def test_check_in_in_future_is_rejected(fixed_now):
    with pytest.raises(ValidationError, match="future"):
        _validate(fixed_now + timedelta(minutes=2), now=fixed_now)


def test_small_clock_skew_is_tolerated(fixed_now):
    _validate(fixed_now + timedelta(seconds=30), now=fixed_now)


def test_submission_window(fixed_now):
    _validate(fixed_now - timedelta(days=7), now=fixed_now)

    with pytest.raises(ValidationError, match="7 days"):
        _validate(fixed_now - timedelta(days=7, minutes=1), now=fixed_now)


def test_submission_window_is_configurable(fixed_now):
    grace = GraceConfig(adjust_request_max_days=14)

    _validate(fixed_now - timedelta(days=10), now=fixed_now, grace=grace)


def test_check_out_must_follow_check_in(fixed_now):
    check_in = time_on_date("2026-01-13", 9, 0)

    with pytest.raises(ValidationError, match="after check-in"):
        _validate(check_in, check_in, now=fixed_now)


def test_same_day_future_check_out_is_rejected(fixed_now):
    with pytest.raises(ValidationError, match="future"):
        _validate(time_on_date("2026-01-14", 8, 30), time_on_date("2026-01-14", 17, 30), now=fixed_now)


def test_cross_midnight_check_out_may_be_ahead_of_now(fixed_now):
    _validate(time_on_date("2026-01-14", 9, 0), time_on_date("2026-01-15", 1, 0), now=fixed_now)


def test_session_longer_than_grace_is_rejected(fixed_now):
    with pytest.raises(ValidationError, match="24h"):
        _validate(time_on_date("2026-01-12", 8, 0), time_on_date("2026-01-13", 9, 0), now=fixed_now)


def test_unparseable_timestamp(fixed_now):
    with pytest.raises(ValidationError, match="checkInAt is invalid"):
        _validate("yesterday morning", now=fixed_now)
