from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_core.attendance_core.database.bootstrap import (
    PURGE_EVENT_NAME,
    apply_schema,
    list_tables,
    purge_event_installed,
)


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    print(
        f"OK: schema applied to {db_config.get('user')}@{db_config.get('host')}:"
        f"{db_config.get('port', 3306)}/{db_config.get('database')} (tables={len(tables)})"
    )

    if purge_event_installed(db_config):
        print(f"OK: anomaly purge event {PURGE_EVENT_NAME} installed")
    else:
        print(
            f"WARN: anomaly purge event {PURGE_EVENT_NAME} missing; "
            "schedule scripts/purge_anomalies.py to drop expired anomaly logs"
        )


if __name__ == "__main__":
    main()
