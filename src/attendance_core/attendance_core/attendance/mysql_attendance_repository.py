from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateAttendanceError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, user_id, work_date, check_in_at, check_out_at, ot_approved"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=str(r["work_date"]),
        check_in_at=from_db_datetime(r.get("check_in_at")),
        check_out_at=from_db_datetime(r.get("check_out_at")),
        ot_approved=bool(r.get("ot_approved")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_open_for_user(self, user_id: int, *, newest_first: bool, limit: int) -> Sequence[AttendanceRecord]:
        order = "DESC" if newest_first else "ASC"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id=%s AND check_in_at IS NOT NULL AND check_out_at IS NULL
                ORDER BY check_in_at {order}
                LIMIT %s
                """,
                (int(user_id), int(limit)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: str,
        check_in_at: datetime,
        ot_approved: bool = False,
    ) -> AttendanceRecord:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_at, ot_approved)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (int(user_id), work_date, to_db_datetime(check_in_at), bool(ot_approved)),
                )
                attendance_id = int(cur.lastrowid)
        except IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateAttendanceError(f"attendance exists for user {user_id} on {work_date}") from e
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=int(user_id),
            work_date=work_date,
            check_in_at=check_in_at,
            check_out_at=None,
            ot_approved=bool(ot_approved),
        )

    def close_session(self, *, attendance_id: int, check_out_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_at=%s
                WHERE attendance_id=%s AND check_in_at IS NOT NULL AND check_out_at IS NULL
                """,
                (to_db_datetime(check_out_at), int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_users_between(
        self,
        user_ids: Sequence[int],
        *,
        start_date: str,
        end_date: str,
    ) -> Sequence[AttendanceRecord]:
        ids = [int(u) for u in user_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE user_id IN ({placeholders}) AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC, user_id ASC
                """,
                (*ids, start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]
