from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, SessionState


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (user, UTC+7 date key)."""

    attendance_id: int
    user_id: int
    work_date: str
    check_in_at: Optional[datetime]
    check_out_at: Optional[datetime] = None
    ot_approved: bool = False

    @property
    def is_open(self) -> bool:
        return self.check_in_at is not None and self.check_out_at is None

    @property
    def session_state(self) -> SessionState:
        if self.check_in_at is None:
            return SessionState.NO_SESSION
        if self.check_out_at is None:
            return SessionState.OPEN
        return SessionState.CLOSED

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "date": self.work_date,
            "checkInAt": self.check_in_at.isoformat() if self.check_in_at else None,
            "checkOutAt": self.check_out_at.isoformat() if self.check_out_at else None,
            "otApproved": self.ot_approved,
        }


@dataclass(frozen=True)
class DayInput:
    """Status engine input for a day that may have no stored record."""

    work_date: str
    check_in_at: Optional[datetime] = None
    check_out_at: Optional[datetime] = None
    ot_approved: bool = False


@dataclass(frozen=True)
class ComputedAttendance:
    """Derived value object, recomputed on every read and never stored."""

    status: AttendanceStatus
    late_minutes: int = 0
    work_minutes: int = 0
    ot_minutes: int = 0

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "lateMinutes": self.late_minutes,
            "workMinutes": self.work_minutes,
            "otMinutes": self.ot_minutes,
        }


UNKNOWN_RESULT = ComputedAttendance(status=AttendanceStatus.UNKNOWN)
