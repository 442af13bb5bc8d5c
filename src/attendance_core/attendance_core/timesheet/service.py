from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.calculator import compute_attendance
from ..attendance.model import DayInput
from ..attendance.repository import AttendanceRepository
from ..calendars.repository import HolidayRepository, LeaveRepository
from ..common.datetime_utils import month_date_keys, normalize_instant, now_utc, to_date_key
from ..core.enums import AttendanceStatus

STATUS_COLOR_MAP = {
    AttendanceStatus.ON_TIME: "green",
    AttendanceStatus.LATE: "red",
    AttendanceStatus.EARLY_LEAVE: "yellow",
    AttendanceStatus.LATE_AND_EARLY: "purple",
    AttendanceStatus.MISSING_CHECKOUT: "yellow",
    AttendanceStatus.MISSING_CHECKIN: "orange",
    AttendanceStatus.WEEKEND_OR_HOLIDAY: "gray",
    AttendanceStatus.LEAVE: "cyan",
    AttendanceStatus.ABSENT: "white",
    AttendanceStatus.WORKING: "white",
    AttendanceStatus.UNKNOWN: "white",
}


@dataclass(frozen=True)
class TimesheetMatrix:
    month: str
    days: list[int]
    rows: list[dict]


class TimesheetService:
    """Month x user grid of statuses, including days with no record."""

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

    def build_matrix(self, user_ids: Sequence[int], month: str, *, now: Optional[datetime] = None) -> TimesheetMatrix:
        keys = month_date_keys(month)
        month = keys[0][:7]
        today = to_date_key(normalize_instant(now) if now is not None else self._clock())

        records = self._attendance.list_for_users_between(user_ids, start_date=keys[0], end_date=keys[-1])
        by_user_date = {(r.user_id, r.work_date): r for r in records}
        holidays = self._holidays.dates_for_month(month) if self._holidays else set()

        rows = []
        for user_id in user_ids:
            leaves = self._leaves.approved_leave_dates(user_id, month) if self._leaves else set()
            cells = []
            for key in keys:
                record = by_user_date.get((user_id, key)) or DayInput(work_date=key)
                computed = compute_attendance(record, holidays, leaves, today=today)
                cells.append(
                    {
                        "date": key,
                        "status": computed.status.value,
                        "colorKey": STATUS_COLOR_MAP[computed.status],
                    }
                )
            rows.append({"userId": user_id, "cells": cells})

        return TimesheetMatrix(month=month, days=[int(k[8:]) for k in keys], rows=rows)
