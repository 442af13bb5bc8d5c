from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ComputedAttendance
from .base import DayContext, StatusStrategy


class LeaveStrategy(StatusStrategy):
    """Approved leave applies only when nothing was punched that day."""

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if ctx.is_leave and not ctx.has_punches:
            return ComputedAttendance(status=AttendanceStatus.LEAVE)
        return None
