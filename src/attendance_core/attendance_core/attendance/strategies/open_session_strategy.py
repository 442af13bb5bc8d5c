from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..minutes import compute_late_minutes
from ..model import ComputedAttendance
from .base import DayContext, StatusStrategy


class WorkingStrategy(StatusStrategy):
    """Checked in today and still at work."""

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if ctx.is_today and ctx.has_check_in and not ctx.has_check_out:
            return ComputedAttendance(
                status=AttendanceStatus.WORKING,
                late_minutes=compute_late_minutes(ctx.date_key, ctx.check_in_at),
            )
        return None


class MissingCheckoutStrategy(StatusStrategy):
    """Past day whose session was never closed."""

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if ctx.is_past and ctx.has_check_in and not ctx.has_check_out:
            return ComputedAttendance(
                status=AttendanceStatus.MISSING_CHECKOUT,
                late_minutes=compute_late_minutes(ctx.date_key, ctx.check_in_at),
            )
        return None
