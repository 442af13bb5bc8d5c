"""Delete anomaly log rows past their retention window.

The schema installs a MySQL EVENT that does this hourly; run this script
on servers where `event_scheduler` is OFF.
"""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_core.attendance_core.anomalies.mysql_anomaly_repository import MySQLAnomalyRepository
from src.attendance_core.attendance_core.common.datetime_utils import now_utc
from src.attendance_core.attendance_core.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(settings.DB_CONFIG))

    removed = MySQLAnomalyRepository(conn).purge_expired(now=now_utc())
    print(f"OK: Purged {removed} expired anomaly log(s)")


if __name__ == "__main__":
    main()
