from __future__ import annotations

from ..common.datetime_utils import date_keys_between, month_date_keys
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import HolidayRepository, LeaveRepository, OtApprovalRepository


def _month_span(month: str) -> tuple[str, str]:
    keys = month_date_keys(month)
    return keys[0], keys[-1]


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def dates_for_month(self, month: str) -> set[str]:
        first, last = _month_span(month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_date FROM holidays WHERE holiday_date BETWEEN %s AND %s",
                (first, last),
            )
            return {str(r["holiday_date"]) for r in fetchall(cur)}


class MySQLRequestCalendarRepository(LeaveRepository, OtApprovalRepository):
    """Approved leave ranges and OT requests from the approval workflow."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def approved_leave_dates(self, user_id: int, month: str) -> set[str]:
        first, last = _month_span(month)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT start_date, end_date
                FROM leave_requests
                WHERE user_id=%s AND status='APPROVED'
                  AND start_date <= %s AND end_date >= %s
                """,
                (int(user_id), last, first),
            )
            rows = fetchall(cur)

        dates: set[str] = set()
        for r in rows:
            for key in date_keys_between(str(r["start_date"]), str(r["end_date"])):
                if first <= key <= last:
                    dates.add(key)
        return dates

    def has_approved_ot(self, user_id: int, date_key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM ot_requests
                WHERE user_id=%s AND work_date=%s AND status='APPROVED'
                LIMIT 1
                """,
                (int(user_id), date_key),
            )
            return fetchone(cur) is not None
