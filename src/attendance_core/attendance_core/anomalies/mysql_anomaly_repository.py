from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, to_db_datetime
from .model import AnomalyLogEntry
from .repository import AnomalyRepository


def _json_default(value: Any) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Unsupported value in anomaly details: {type(value)!r}")


class MySQLAnomalyRepository(AnomalyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, entry: AnomalyLogEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO anomaly_logs(anomaly_type, user_id, details, created_at, expires_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    entry.anomaly_type.value,
                    int(entry.user_id),
                    json.dumps(entry.details, default=_json_default),
                    to_db_datetime(entry.created_at),
                    to_db_datetime(entry.expires_at),
                ),
            )
            return int(cur.lastrowid)

    def purge_expired(self, *, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM anomaly_logs WHERE expires_at <= %s", (to_db_datetime(now),))
            return int(cur.rowcount)
