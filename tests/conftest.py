from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional, Sequence

import pytest

from src.attendance_core.attendance_core.anomalies.model import AnomalyLogEntry
from src.attendance_core.attendance_core.anomalies.service import AnomalyLogger
from src.attendance_core.attendance_core.attendance.model import AttendanceRecord
from src.attendance_core.attendance_core.attendance.service import AttendanceService
from src.attendance_core.attendance_core.common.grace_config import GraceConfig
from src.attendance_core.attendance_core.core.exceptions import DuplicateAttendanceError


class InMemoryAttendance:
    """Mimics the MySQL repository: unique (user, date) and conditional close."""

    def __init__(self, records: Sequence[AttendanceRecord] = ()):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0
        self.lose_close_race = False
        for r in records:
            self.add(r)

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._id = max(self._id, record.attendance_id)
        self.records[record.attendance_id] = record
        return record

    def get_for_user_and_date(self, user_id: int, work_date: str) -> Optional[AttendanceRecord]:
        for r in self.records.values():
            if r.user_id == user_id and r.work_date == work_date:
                return r
        return None

    def find_open_for_user(self, user_id: int, *, newest_first: bool, limit: int):
        items = [r for r in self.records.values() if r.user_id == user_id and r.is_open]
        items.sort(key=lambda r: r.check_in_at, reverse=newest_first)
        return items[:limit]

    def create_checkin(self, *, user_id: int, work_date: str, check_in_at: datetime, ot_approved: bool = False):
        if self.get_for_user_and_date(user_id, work_date) is not None:
            raise DuplicateAttendanceError(f"{user_id}/{work_date}")
        self._id += 1
        return self.add(
            AttendanceRecord(
                attendance_id=self._id,
                user_id=user_id,
                work_date=work_date,
                check_in_at=check_in_at,
                ot_approved=ot_approved,
            )
        )

    def close_session(self, *, attendance_id: int, check_out_at: datetime) -> bool:
        current = self.records.get(attendance_id)
        if current is None or current.check_out_at is not None:
            return False
        self.records[attendance_id] = replace(current, check_out_at=check_out_at)
        # Simulates another request closing it between our read and the update.
        return not self.lose_close_race

    def list_for_users_between(self, user_ids, *, start_date: str, end_date: str):
        wanted = set(user_ids)
        return [
            r
            for r in self.records.values()
            if r.user_id in wanted and start_date <= r.work_date <= end_date
        ]


class InMemoryAnomalies:
    def __init__(self, fail: bool = False):
        self.entries: list[AnomalyLogEntry] = []
        self.fail = fail

    def create(self, entry: AnomalyLogEntry) -> int:
        if self.fail:
            raise RuntimeError("anomaly store unavailable")
        self.entries.append(entry)
        return len(self.entries)

    def purge_expired(self, *, now: datetime) -> int:
        before = len(self.entries)
        self.entries = [e for e in self.entries if e.expires_at > now]
        return before - len(self.entries)


class FakeCalendar:
    """Holiday, leave and OT approval lookups backed by plain sets."""

    def __init__(self, holidays=(), leaves=None, ot=()):
        self.holidays = set(holidays)
        self.leaves = {k: set(v) for k, v in (leaves or {}).items()}
        self.ot = set(ot)

    def dates_for_month(self, month: str) -> set[str]:
        return {d for d in self.holidays if d.startswith(month)}

    def approved_leave_dates(self, user_id: int, month: str) -> set[str]:
        return {d for d in self.leaves.get(user_id, set()) if d.startswith(month)}

    def has_approved_ot(self, user_id: int, date_key: str) -> bool:
        return (user_id, date_key) in self.ot


@pytest.fixture
def fixed_now() -> datetime:
    # Wednesday 2026-01-14 10:00 in UTC+7
    return datetime(2026, 1, 14, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def anomaly_repo() -> InMemoryAnomalies:
    return InMemoryAnomalies()


@pytest.fixture
def anomaly_logger(anomaly_repo) -> AnomalyLogger:
    return AnomalyLogger(anomaly_repo, background=False)


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def grace() -> GraceConfig:
    return GraceConfig()


@pytest.fixture
def service(attendance_repo, anomaly_logger, grace, calendar, fixed_now) -> AttendanceService:
    return AttendanceService(
        attendance_repo,
        anomaly_logger,
        grace,
        ot_approvals=calendar,
        holidays=calendar,
        leaves=calendar,
        clock=lambda: fixed_now,
    )
