"""Read-only calendar facts owned by other services.

Holidays come from the holiday calendar; approved leave and OT approvals
come from the request-approval workflow. This package only reads them.
"""

from __future__ import annotations

from typing import Protocol


class HolidayRepository(Protocol):
    def dates_for_month(self, month: str) -> set[str]:
        raise NotImplementedError


class LeaveRepository(Protocol):
    def approved_leave_dates(self, user_id: int, month: str) -> set[str]:
        """Approved leave days of ``user_id`` that fall inside ``month``."""

        raise NotImplementedError


class OtApprovalRepository(Protocol):
    def has_approved_ot(self, user_id: int, date_key: str) -> bool:
        raise NotImplementedError
