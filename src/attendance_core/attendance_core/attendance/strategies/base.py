from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..model import ComputedAttendance


@dataclass(frozen=True)
class DayContext:
    """Normalized view of one day handed to each status strategy.

    ``valid`` is False when the date key or a punch could not be parsed; all
    other flags are only meaningful for valid contexts.
    """

    valid: bool
    date_key: Optional[str] = None
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
    ot_approved: bool = False
    is_non_working_day: bool = False
    is_leave: bool = False
    is_today: bool = False
    is_past: bool = False

    @property
    def has_check_in(self) -> bool:
        return self.check_in_at is not None

    @property
    def has_check_out(self) -> bool:
        return self.check_out_at is not None

    @property
    def has_punches(self) -> bool:
        return self.has_check_in or self.has_check_out


class StatusStrategy(ABC):
    """Strategy Pattern: one step of the status precedence chain.

    ``decide`` returns a result to stop the chain, or ``None`` to let the
    next strategy look at the day.
    """

    @abstractmethod
    def decide(self, ctx: DayContext) -> Optional[ComputedAttendance]:
        raise NotImplementedError
