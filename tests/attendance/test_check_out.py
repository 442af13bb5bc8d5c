from datetime import datetime, timedelta, timezone

import pytest

from src.attendance_core.attendance_core.attendance.model import AttendanceRecord
from src.attendance_core.attendance_core.common.datetime_utils import time_on_date
from src.attendance_core.attendance_core.core.enums import AnomalyType, AttendanceErrorCode, SessionState
from src.attendance_core.attendance_core.core.exceptions import AttendanceError


def _open(attendance_id, work_date, check_in_at, user_id=1):
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        work_date=work_date,
        check_in_at=check_in_at,
    )


def test_check_out_without_session(service):
    with pytest.raises(AttendanceError) as exc:
        service.check_out(1)

    assert exc.value.reason == AttendanceErrorCode.MUST_CHECK_IN_FIRST


def test_check_out_closes_todays_session(service, attendance_repo, fixed_now):
    attendance_repo.add(_open(1, "2026-01-14", time_on_date("2026-01-14", 8, 30)))

    record = service.check_out(1)

    assert record.check_out_at == fixed_now
    assert record.session_state == SessionState.CLOSED
    assert attendance_repo.records[1].check_out_at == fixed_now


def test_check_out_after_midnight_closes_previous_day(service, attendance_repo):
    attendance_repo.add(_open(1, "2026-01-13", time_on_date("2026-01-13", 20, 0)))
    now = time_on_date("2026-01-14", 1, 30)

    record = service.check_out(1, now=now)

    assert record.work_date == "2026-01-13"
    assert record.check_out_at == now
    assert attendance_repo.get_for_user_and_date(1, "2026-01-14") is None


def test_check_out_exactly_at_grace_limit_succeeds(service, attendance_repo, fixed_now, anomaly_repo):
    attendance_repo.add(_open(1, "2026-01-13", fixed_now - timedelta(hours=24)))

    service.check_out(1)

    assert attendance_repo.records[1].check_out_at == fixed_now
    assert anomaly_repo.entries == []


def test_check_out_past_grace_limit_is_rejected_and_logged(service, attendance_repo, fixed_now, anomaly_repo):
    attendance_repo.add(_open(1, "2026-01-13", fixed_now - timedelta(hours=24, milliseconds=1)))

    with pytest.raises(AttendanceError) as exc:
        service.check_out(1)

    assert exc.value.reason == AttendanceErrorCode.SESSION_EXPIRED
    assert attendance_repo.records[1].check_out_at is None
    [entry] = anomaly_repo.entries
    assert entry.anomaly_type == AnomalyType.STALE_OPEN_SESSION
    assert entry.details["detectedAt"] == "checkOut"
    assert entry.details["sessionDate"] == "2026-01-13"


def test_check_out_with_multiple_open_sessions_closes_newest(service, attendance_repo, anomaly_repo):
    attendance_repo.add(_open(1, "2026-01-13", time_on_date("2026-01-13", 8, 0)))
    attendance_repo.add(_open(2, "2026-01-14", time_on_date("2026-01-14", 8, 30)))

    record = service.check_out(1)

    assert record.attendance_id == 2
    assert attendance_repo.records[1].check_out_at is None
    [entry] = anomaly_repo.entries
    assert entry.anomaly_type == AnomalyType.MULTIPLE_ACTIVE_SESSIONS
    assert entry.details["sessionCount"] == 2
    assert [s["id"] for s in entry.details["sessions"]] == [2, 1]


def test_check_out_loses_race(service, attendance_repo):
    attendance_repo.add(_open(1, "2026-01-14", time_on_date("2026-01-14", 8, 30)))
    attendance_repo.lose_close_race = True

    with pytest.raises(AttendanceError) as exc:
        service.check_out(1)

    assert exc.value.reason == AttendanceErrorCode.ALREADY_CHECKED_OUT


def test_second_check_out_needs_new_check_in(service, attendance_repo):
    attendance_repo.add(_open(1, "2026-01-14", time_on_date("2026-01-14", 8, 30)))
    service.check_out(1)

    with pytest.raises(AttendanceError) as exc:
        service.check_out(1)

    assert exc.value.reason == AttendanceErrorCode.MUST_CHECK_IN_FIRST


def test_naive_now_is_treated_as_utc(service, attendance_repo):
    attendance_repo.add(_open(1, "2026-01-14", time_on_date("2026-01-14", 8, 30)))

    record = service.check_out(1, now=datetime(2026, 1, 14, 10, 30))

    assert record.check_out_at == datetime(2026, 1, 14, 10, 30, tzinfo=timezone.utc)
