from __future__ import annotations

from dataclasses import dataclass

from .anomalies.mysql_anomaly_repository import MySQLAnomalyRepository
from .anomalies.service import AnomalyLogger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .calendars.mysql_calendar_repository import MySQLHolidayRepository, MySQLRequestCalendarRepository
from .common.grace_config import GraceConfig
from .database.connection import DBConfig, DatabaseConnection
from .payroll.service import PayrollReportService
from .timesheet.service import TimesheetService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    grace: GraceConfig

    attendance_repo: MySQLAttendanceRepository
    anomaly_repo: MySQLAnomalyRepository
    holidays_repo: MySQLHolidayRepository
    requests_repo: MySQLRequestCalendarRepository

    anomaly_logger: AnomalyLogger
    attendance_service: AttendanceService
    timesheet_service: TimesheetService
    payroll_report_service: PayrollReportService


def build_container(*, db_config: dict, grace: GraceConfig | None = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    grace = grace or GraceConfig.from_env()

    attendance_repo = MySQLAttendanceRepository(conn)
    anomaly_repo = MySQLAnomalyRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    requests_repo = MySQLRequestCalendarRepository(conn)

    anomaly_logger = AnomalyLogger(anomaly_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        anomaly_logger,
        grace,
        ot_approvals=requests_repo,
        holidays=holidays_repo,
        leaves=requests_repo,
    )
    timesheet_service = TimesheetService(attendance_repo, holidays=holidays_repo, leaves=requests_repo)
    payroll_report_service = PayrollReportService(attendance_repo, holidays=holidays_repo, leaves=requests_repo)

    return Container(
        conn=conn,
        grace=grace,
        attendance_repo=attendance_repo,
        anomaly_repo=anomaly_repo,
        holidays_repo=holidays_repo,
        requests_repo=requests_repo,
        anomaly_logger=anomaly_logger,
        attendance_service=attendance_service,
        timesheet_service=timesheet_service,
        payroll_report_service=payroll_report_service,
    )
