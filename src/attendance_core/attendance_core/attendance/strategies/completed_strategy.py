from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..minutes import compute_late_minutes, compute_ot_minutes, compute_work_minutes, is_early_leave
from ..model import UNKNOWN_RESULT, ComputedAttendance
from .base import DayContext, StatusStrategy


class CompletedSessionStrategy(StatusStrategy):
    """Both punches present.

    Priority: LATE_AND_EARLY > LATE > EARLY_LEAVE > ON_TIME.
    """

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if not (ctx.has_check_in and ctx.has_check_out):
            return None

        if ctx.check_out_at < ctx.check_in_at:
            return UNKNOWN_RESULT

        late = compute_late_minutes(ctx.date_key, ctx.check_in_at)
        early = is_early_leave(ctx.date_key, ctx.check_out_at)

        if late > 0 and early:
            status = AttendanceStatus.LATE_AND_EARLY
        elif late > 0:
            status = AttendanceStatus.LATE
        elif early:
            status = AttendanceStatus.EARLY_LEAVE
        else:
            status = AttendanceStatus.ON_TIME

        return ComputedAttendance(
            status=status,
            late_minutes=late,
            work_minutes=compute_work_minutes(
                ctx.date_key, ctx.check_in_at, ctx.check_out_at, ot_approved=ctx.ot_approved
            ),
            ot_minutes=compute_ot_minutes(ctx.date_key, ctx.check_out_at, ot_approved=ctx.ot_approved),
        )
