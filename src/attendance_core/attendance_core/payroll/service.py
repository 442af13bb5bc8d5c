from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.calculator import compute_attendance
from ..attendance.minutes import compute_potential_ot_minutes
from ..attendance.model import DayInput
from ..attendance.repository import AttendanceRepository
from ..calendars.repository import HolidayRepository, LeaveRepository
from ..common.datetime_utils import month_date_keys, normalize_instant, now_utc, to_date_key
from ..core.enums import AttendanceStatus

_PRESENT = {
    AttendanceStatus.ON_TIME,
    AttendanceStatus.LATE,
    AttendanceStatus.EARLY_LEAVE,
    AttendanceStatus.LATE_AND_EARLY,
    AttendanceStatus.WORKING,
    AttendanceStatus.MISSING_CHECKOUT,
}
_EARLY = {AttendanceStatus.EARLY_LEAVE, AttendanceStatus.LATE_AND_EARLY}


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class ReportData:
    month: str
    summary: list[dict]


class PayrollReportService:
    """Monthly per-user totals built from computed attendance."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        holidays: Optional[HolidayRepository] = None,
        leaves: Optional[LeaveRepository] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._holidays = holidays
        self._leaves = leaves
        self._clock = clock

    def build_monthly_report(self, user_ids: Sequence[int], month: str, *, now: Optional[datetime] = None) -> ReportData:
        keys = month_date_keys(month)
        month = keys[0][:7]
        today = to_date_key(normalize_instant(now) if now is not None else self._clock())

        records = self._attendance.list_for_users_between(user_ids, start_date=keys[0], end_date=keys[-1])
        by_user_date = {(r.user_id, r.work_date): r for r in records}
        holidays = self._holidays.dates_for_month(month) if self._holidays else set()

        summary = []
        for user_id in user_ids:
            leaves = self._leaves.approved_leave_dates(user_id, month) if self._leaves else set()
            totals = {
                "present_days": 0,
                "late_count": 0,
                "late_minutes": 0,
                "early_leave_count": 0,
                "absent_days": 0,
                "leave_days": 0,
                "work_minutes": 0,
                "ot_minutes": 0,
                "potential_ot_minutes": 0,
            }

            for key in keys:
                record = by_user_date.get((user_id, key)) or DayInput(work_date=key)
                computed = compute_attendance(record, holidays, leaves, today=today)

                if computed.status in _PRESENT:
                    totals["present_days"] += 1
                elif computed.status == AttendanceStatus.ABSENT:
                    totals["absent_days"] += 1
                elif computed.status == AttendanceStatus.LEAVE:
                    totals["leave_days"] += 1

                # Late is counted by minutes, so open sessions count too.
                if computed.late_minutes > 0:
                    totals["late_count"] += 1
                    totals["late_minutes"] += computed.late_minutes
                if computed.status in _EARLY:
                    totals["early_leave_count"] += 1

                totals["work_minutes"] += computed.work_minutes
                totals["ot_minutes"] += computed.ot_minutes
                if (
                    record.check_in_at
                    and record.check_out_at
                    and record.check_out_at >= record.check_in_at
                    and computed.status != AttendanceStatus.UNKNOWN
                ):
                    totals["potential_ot_minutes"] += compute_potential_ot_minutes(key, record.check_out_at)

            summary.append(
                {
                    "user_id": user_id,
                    **totals,
                    "work_hours": format_minutes(totals["work_minutes"]),
                    "ot_hours": format_minutes(totals["ot_minutes"]),
                }
            )

        summary.sort(key=lambda x: x["work_minutes"], reverse=True)
        return ReportData(month=month, summary=summary)
