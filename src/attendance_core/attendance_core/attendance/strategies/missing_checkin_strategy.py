from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ..model import ComputedAttendance
from .base import DayContext, StatusStrategy


class MissingCheckInStrategy(StatusStrategy):
    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if ctx.has_check_out and not ctx.has_check_in:
            return ComputedAttendance(status=AttendanceStatus.MISSING_CHECKIN)
        return None
