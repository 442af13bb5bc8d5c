"""Apply ``database/schema.sql`` to a MySQL server.

Statements are applied one at a time and are idempotent (``IF NOT
EXISTS``), so running this on every start is safe.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from mysql.connector import Error as MySQLError
from mysql.connector import errorcode

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

# Errors that mean "no event scheduler for you" rather than a broken schema.
_EVENT_SOFT_ERRORS = {
    errorcode.ER_SPECIFIC_ACCESS_DENIED_ERROR,
    errorcode.ER_DBACCESS_DENIED_ERROR,
    1290,  # ER_OPTION_PREVENTS_STATEMENT (event scheduler disabled)
    1577,  # ER_EVENTS_DB_ERROR
}

_CREATE_EVENT_RE = re.compile(r"^\s*CREATE\s+EVENT\b", re.IGNORECASE)

PURGE_EVENT_NAME = "ev_purge_expired_anomaly_logs"


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from DB_CONFIG, not from the file.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ``;`` outside quoted strings."""
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def load_schema_statements(schema_path: str | Path) -> list[str]:
    sql = Path(schema_path).read_text(encoding="utf-8")
    return list(iter_sql_statements(_strip_line_comments(_strip_create_db_and_use(sql))))


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create missing tables and the anomaly purge event.

    A server that refuses the EVENT (no privilege, scheduler unavailable)
    still gets its tables; expired anomaly rows must then be removed with
    ``scripts/purge_anomalies.py``.
    """
    config = DBConfig.from_mapping(db_config)
    ensure_database_exists(db_config)
    statements = load_schema_statements(schema_path)

    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            try:
                cur.execute(stmt)
            except MySQLError as e:
                if _CREATE_EVENT_RE.match(stmt) and e.errno in _EVENT_SOFT_ERRORS:
                    logger.warning("Skipping anomaly purge event (%s); schedule purge_anomalies.py instead", e)
                    continue
                raise
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %d schema statements to %s", len(statements), config.database)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def purge_event_installed(db_config: dict) -> bool:
    """Whether the hourly anomaly purge event exists in the target database."""
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute(
            "SELECT 1 FROM information_schema.EVENTS WHERE EVENT_SCHEMA=%s AND EVENT_NAME=%s",
            (config.database, PURGE_EVENT_NAME),
        )
        return cur.fetchone() is not None
    finally:
        conn.close()
