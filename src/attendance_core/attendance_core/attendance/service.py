from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Callable, Optional, Union

from ..anomalies.model import SessionSummary
from ..anomalies.service import AnomalyLogger
from ..calendars.repository import HolidayRepository, LeaveRepository, OtApprovalRepository
from ..common.datetime_utils import month_date_keys, month_of, normalize_instant, now_utc, to_date_key
from ..common.grace_config import GraceConfig
from ..common.validators import require_user_id
from ..core.constants import OPEN_SESSION_SCAN_LIMIT
from ..core.enums import AttendanceErrorCode, DetectedAt
from ..core.exceptions import AttendanceError, DuplicateAttendanceError
from .calculator import compute_attendance
from .model import AttendanceRecord, ComputedAttendance, DayInput
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceDay:
    """Read-model: one day of a user's attendance with its computed status."""

    date: str
    record: Union[AttendanceRecord, DayInput]
    computed: ComputedAttendance

    def to_dict(self) -> dict:
        check_in = self.record.check_in_at
        check_out = self.record.check_out_at
        return {
            "date": self.date,
            "checkInAt": check_in.isoformat() if check_in else None,
            "checkOutAt": check_out.isoformat() if check_out else None,
            "otApproved": self.record.ot_approved,
            **self.computed.to_dict(),
        }


@dataclass(frozen=True)
class TodayView:
    day: AttendanceDay
    # Newest open session when it belongs to an earlier date (cross-midnight).
    open_session: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        return {
            **self.day.to_dict(),
            "openSession": self.open_session.to_dict() if self.open_session else None,
        }


class AttendanceService:
    """Check-in/check-out state machine plus the per-user read paths.

    Per record: NO_SESSION --check_in--> OPEN --check_out--> CLOSED. A user
    should hold at most one OPEN record; that is enforced here, and breaches
    found in stored data are reported to the anomaly log rather than
    rejected outright. Races are settled by the repository (unique
    (user, date) key and a conditional check-out update).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        anomalies: AnomalyLogger,
        grace: GraceConfig,
        *,
        ot_approvals: Optional[OtApprovalRepository] = None,
        holidays: Optional[HolidayRepository] = None,
        leaves: Optional[LeaveRepository] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._attendance = attendance
        self._anomalies = anomalies
        self._grace = grace
        self._ot_approvals = ot_approvals
        self._holidays = holidays
        self._leaves = leaves
        self._clock = clock

    def _now(self, now: Optional[datetime]) -> datetime:
        return normalize_instant(now) if now is not None else self._clock()

    def _emit(self, log: Callable[..., None], **kwargs: Any) -> None:
        try:
            log(**kwargs)
        except Exception:
            logger.exception("Anomaly logging failed for user %s", kwargs.get("user_id"))

    def _is_stale(self, record: AttendanceRecord, now: datetime) -> bool:
        return record.check_in_at < now - self._grace.checkout_grace

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        user_id = require_user_id(user_id)
        now = self._now(now)

        open_records = self._attendance.find_open_for_user(
            user_id, newest_first=False, limit=OPEN_SESSION_SCAN_LIMIT
        )
        if open_records:
            oldest = open_records[0]
            if self._is_stale(oldest, now):
                self._emit(
                    self._anomalies.log_stale_open_session,
                    user_id=user_id,
                    session_date=oldest.work_date,
                    check_in_at=oldest.check_in_at,
                    detected_at=DetectedAt.CHECK_IN,
                )
            logger.info("Check-in rejected for user %s: open session from %s", user_id, oldest.work_date)
            raise AttendanceError(AttendanceErrorCode.OPEN_SESSION_EXISTS)

        today = to_date_key(now)
        ot_approved = bool(self._ot_approvals and self._ot_approvals.has_approved_ot(user_id, today))

        try:
            record = self._attendance.create_checkin(
                user_id=user_id,
                work_date=today,
                check_in_at=now,
                ot_approved=ot_approved,
            )
        except DuplicateAttendanceError:
            logger.info("Check-in rejected for user %s: record for %s already exists", user_id, today)
            raise AttendanceError(AttendanceErrorCode.ALREADY_CHECKED_IN)

        logger.info("User %s checked in for %s", user_id, today)
        return record

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        user_id = require_user_id(user_id)
        now = self._now(now)

        open_records = self._attendance.find_open_for_user(
            user_id, newest_first=True, limit=OPEN_SESSION_SCAN_LIMIT
        )
        if not open_records:
            raise AttendanceError(AttendanceErrorCode.MUST_CHECK_IN_FIRST)

        if len(open_records) > 1:
            self._emit(
                self._anomalies.log_multiple_active_sessions,
                user_id=user_id,
                sessions=[
                    SessionSummary(attendance_id=r.attendance_id, work_date=r.work_date, check_in_at=r.check_in_at)
                    for r in open_records
                ],
                session_count=len(open_records),
            )

        current = open_records[0]
        if self._is_stale(current, now):
            self._emit(
                self._anomalies.log_stale_open_session,
                user_id=user_id,
                session_date=current.work_date,
                check_in_at=current.check_in_at,
                detected_at=DetectedAt.CHECK_OUT,
            )
            logger.info("Check-out rejected for user %s: session from %s expired", user_id, current.work_date)
            raise AttendanceError(AttendanceErrorCode.SESSION_EXPIRED)

        if not self._attendance.close_session(attendance_id=current.attendance_id, check_out_at=now):
            raise AttendanceError(AttendanceErrorCode.ALREADY_CHECKED_OUT)

        logger.info("User %s checked out session from %s", user_id, current.work_date)
        return replace(current, check_out_at=now)

    def _calendar_for(self, user_id: int, month: str) -> tuple[set[str], set[str]]:
        holidays = self._holidays.dates_for_month(month) if self._holidays else set()
        leaves = self._leaves.approved_leave_dates(user_id, month) if self._leaves else set()
        return holidays, leaves

    def get_today(self, user_id: int, *, now: Optional[datetime] = None) -> TodayView:
        user_id = require_user_id(user_id)
        now = self._now(now)
        today = to_date_key(now)

        record = self._attendance.get_for_user_and_date(user_id, today)
        day_input = record or DayInput(work_date=today)
        holidays, leaves = self._calendar_for(user_id, month_of(today))
        computed = compute_attendance(day_input, holidays, leaves, today=today)

        open_session = None
        if record is None or not record.is_open:
            newest = self._attendance.find_open_for_user(user_id, newest_first=True, limit=1)
            if newest and newest[0].work_date != today:
                open_session = newest[0]

        return TodayView(day=AttendanceDay(date=today, record=day_input, computed=computed), open_session=open_session)

    def get_monthly_history(self, user_id: int, month: str, *, now: Optional[datetime] = None) -> list[AttendanceDay]:
        """Stored records of ``month`` in date order, each with its computed status."""

        user_id = require_user_id(user_id)
        keys = month_date_keys(month)
        today = to_date_key(self._now(now))

        records = self._attendance.list_for_users_between([user_id], start_date=keys[0], end_date=keys[-1])
        holidays, leaves = self._calendar_for(user_id, month_of(keys[0]))

        return [
            AttendanceDay(
                date=r.work_date,
                record=r,
                computed=compute_attendance(r, holidays, leaves, today=today),
            )
            for r in sorted(records, key=lambda r: r.work_date)
        ]
