import pytest

from src.attendance_core.attendance_core.attendance.model import AttendanceRecord
from src.attendance_core.attendance_core.common.datetime_utils import time_on_date
from src.attendance_core.attendance_core.core.enums import AttendanceStatus
from src.attendance_core.attendance_core.core.exceptions import ValidationError


def _record(attendance_id, date_key, check_in, check_out=None, user_id=1):
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        work_date=date_key,
        check_in_at=time_on_date(date_key, *check_in),
        check_out_at=time_on_date(date_key, *check_out) if check_out else None,
    )


def test_today_without_record(service):
    view = service.get_today(1)

    assert view.day.date == "2026-01-14"
    assert view.day.computed.status == AttendanceStatus.UNKNOWN
    assert view.open_session is None
    assert view.to_dict()["checkInAt"] is None


def test_today_while_working(service):
    service.check_in(1, now=time_on_date("2026-01-14", 9, 0))

    view = service.get_today(1)

    assert view.day.computed.status == AttendanceStatus.WORKING
    assert view.day.computed.late_minutes == 15
    assert view.open_session is None


def test_today_surfaces_session_from_previous_day(service, attendance_repo):
    attendance_repo.add(_record(4, "2026-01-13", (20, 0)))

    view = service.get_today(1)

    assert view.open_session.attendance_id == 4
    assert view.to_dict()["openSession"]["date"] == "2026-01-13"


def test_today_on_holiday(service, calendar):
    calendar.holidays.add("2026-01-14")

    assert service.get_today(1).day.computed.status == AttendanceStatus.WEEKEND_OR_HOLIDAY


def test_monthly_history_sorted_with_computed_status(service, attendance_repo):
    attendance_repo.add(_record(2, "2026-01-13", (8, 30), (17, 30)))
    attendance_repo.add(_record(1, "2026-01-12", (9, 0)))
    attendance_repo.add(_record(3, "2025-12-31", (8, 30), (17, 30)))
    attendance_repo.add(_record(9, "2026-01-13", (8, 0), (17, 30), user_id=2))

    days = service.get_monthly_history(1, "2026-01")

    assert [d.date for d in days] == ["2026-01-12", "2026-01-13"]
    assert days[0].computed.status == AttendanceStatus.MISSING_CHECKOUT
    assert days[1].to_dict()["status"] == "ON_TIME"
    assert days[1].to_dict()["workMinutes"] == 480


def test_monthly_history_rejects_bad_month(service):
    with pytest.raises(ValidationError):
        service.get_monthly_history(1, "January")
