from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_open_for_user(self, user_id: int, *, newest_first: bool, limit: int) -> Sequence[AttendanceRecord]:
        """Open records of the user across all dates, ordered by check-in."""

        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: str,
        check_in_at: datetime,
        ot_approved: bool = False,
    ) -> AttendanceRecord:
        """Insert a new open record.

        Raises ``DuplicateAttendanceError`` when (user, date) already exists.
        """

        raise NotImplementedError

    def close_session(self, *, attendance_id: int, check_out_at: datetime) -> bool:
        """Set check-out only if it is still empty; False when nothing matched."""

        raise NotImplementedError

    def list_for_users_between(
        self,
        user_ids: Sequence[int],
        *,
        start_date: str,
        end_date: str,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
