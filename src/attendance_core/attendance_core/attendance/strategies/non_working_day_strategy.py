from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..minutes import compute_ot_minutes, compute_work_minutes
from ..model import ComputedAttendance
from .base import DayContext, StatusStrategy


class NonWorkingDayStrategy(StatusStrategy):
    """Weekends and holidays always win, whatever the punches say.

    Work on these days counts as overtime without approval, and there is no
    notion of being late.
    """

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if not ctx.is_non_working_day:
            return None

        if not (ctx.has_check_in and ctx.has_check_out) or ctx.check_out_at < ctx.check_in_at:
            return ComputedAttendance(status=AttendanceStatus.WEEKEND_OR_HOLIDAY)

        return ComputedAttendance(
            status=AttendanceStatus.WEEKEND_OR_HOLIDAY,
            late_minutes=0,
            work_minutes=compute_work_minutes(ctx.date_key, ctx.check_in_at, ctx.check_out_at, ot_approved=True),
            ot_minutes=compute_ot_minutes(ctx.date_key, ctx.check_out_at, ot_approved=True),
        )
