"""Example: use the service layer directly (no Flask).

Controllers stay thin; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_core.attendance_core.common.grace_config import GraceConfig
from src.attendance_core.attendance_core.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, grace=GraceConfig.from_settings(settings))
    try:
        for day in container.attendance_service.get_monthly_history(1, "2026-01"):
            print(day.to_dict())
        print(container.timesheet_service.build_matrix([1], "2026-01").rows[0]["cells"][:5])
    finally:
        container.anomaly_logger.close()


if __name__ == "__main__":
    main()
