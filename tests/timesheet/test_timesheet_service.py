import pytest

from src.attendance_core.attendance_core.attendance.model import AttendanceRecord
from src.attendance_core.attendance_core.common.datetime_utils import time_on_date
from src.attendance_core.attendance_core.core.exceptions import ValidationError
from src.attendance_core.attendance_core.timesheet.service import TimesheetService


def _record(attendance_id, user_id, date_key, check_in, check_out=None):
    return AttendanceRecord(
        attendance_id=attendance_id,
        user_id=user_id,
        work_date=date_key,
        check_in_at=time_on_date(date_key, *check_in),
        check_out_at=time_on_date(date_key, *check_out) if check_out else None,
    )


@pytest.fixture
def timesheet(attendance_repo, calendar, fixed_now):
    attendance_repo.add(_record(1, 1, "2026-01-12", (9, 0), (17, 30)))
    attendance_repo.add(_record(2, 1, "2026-01-13", (8, 30), (17, 30)))
    attendance_repo.add(_record(3, 1, "2026-01-14", (8, 30)))
    calendar.holidays.add("2026-01-01")
    calendar.leaves[2] = {"2026-01-13"}
    return TimesheetService(attendance_repo, holidays=calendar, leaves=calendar, clock=lambda: fixed_now)


def _cells(matrix, user_id):
    row = next(r for r in matrix.rows if r["userId"] == user_id)
    return {c["date"]: (c["status"], c["colorKey"]) for c in row["cells"]}


def test_matrix_covers_every_day_of_month(timesheet):
    matrix = timesheet.build_matrix([1, 2], "2026-01")

    assert matrix.month == "2026-01"
    assert matrix.days == list(range(1, 32))
    assert [r["userId"] for r in matrix.rows] == [1, 2]
    assert all(len(r["cells"]) == 31 for r in matrix.rows)


def test_matrix_statuses_and_colors(timesheet):
    cells = _cells(timesheet.build_matrix([1, 2], "2026-01"), 1)

    assert cells["2026-01-01"] == ("WEEKEND_OR_HOLIDAY", "gray")
    assert cells["2026-01-02"] == ("ABSENT", "white")
    assert cells["2026-01-03"] == ("WEEKEND_OR_HOLIDAY", "gray")
    assert cells["2026-01-12"] == ("LATE", "red")
    assert cells["2026-01-13"] == ("ON_TIME", "green")
    assert cells["2026-01-14"] == ("WORKING", "white")
    assert cells["2026-01-20"] == ("UNKNOWN", "white")


def test_leave_is_per_user(timesheet):
    matrix = timesheet.build_matrix([1, 2], "2026-01")

    assert _cells(matrix, 2)["2026-01-13"] == ("LEAVE", "cyan")
    assert _cells(matrix, 1)["2026-01-13"] == ("ON_TIME", "green")


def test_invalid_month(timesheet):
    with pytest.raises(ValidationError):
        timesheet.build_matrix([1], "2026-13")
