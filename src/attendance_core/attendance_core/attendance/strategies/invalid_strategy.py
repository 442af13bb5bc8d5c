from __future__ import annotations

from typing import Optional

from ..model import UNKNOWN_RESULT, ComputedAttendance
from .base import DayContext, StatusStrategy


class InvalidInputStrategy(StatusStrategy):
    """Unparseable date key, punch or non-record input."""

    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        if not ctx.valid:
            return UNKNOWN_RESULT
        return None
