from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ComputedAttendance
from .base import DayContext, StatusStrategy


class AbsentStrategy(StatusStrategy):
    """Past working day with no punches and no approved leave."""

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if ctx.is_past and not ctx.has_punches and not ctx.is_leave:
            return ComputedAttendance(status=AttendanceStatus.ABSENT)
        return None
