from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .model import UNKNOWN_RESULT, ComputedAttendance
from .strategies.absent_strategy import AbsentStrategy
from .strategies.base import DayContext, StatusStrategy
from .strategies.completed_strategy import CompletedSessionStrategy
from .strategies.invalid_strategy import InvalidInputStrategy
from .strategies.leave_strategy import LeaveStrategy
from .strategies.missing_checkin_strategy import MissingCheckInStrategy
from .strategies.non_working_day_strategy import NonWorkingDayStrategy
from .strategies.open_session_strategy import MissingCheckoutStrategy, WorkingStrategy


def default_strategies() -> tuple[StatusStrategy, ...]:
    """Status precedence, first match wins.

    invalid > weekend/holiday > leave > missing check-in > working >
    missing checkout > completed session > absent.
    """
    return (
        InvalidInputStrategy(),
        NonWorkingDayStrategy(),
        LeaveStrategy(),
        MissingCheckInStrategy(),
        WorkingStrategy(),
        MissingCheckoutStrategy(),
        CompletedSessionStrategy(),
        AbsentStrategy(),
    )


@dataclass
class StatusStrategyChain:
    """Chain of Responsibility over status strategies; UNKNOWN when none match."""

    strategies: Sequence[StatusStrategy] = field(default_factory=default_strategies)

    def evaluate(self, ctx: DayContext) -> ComputedAttendance:
        for strategy in self.strategies:
            result = strategy.decide(ctx)
            if result is not None:
                return result
        return UNKNOWN_RESULT
