from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.datetime_utils import is_valid_date_key, normalize_instant
from ..core.constants import ANOMALY_RETENTION_DAYS, ANOMALY_SESSION_SUMMARY_LIMIT
from ..core.enums import AnomalyType, DetectedAt
from ..core.exceptions import AnomalyValidationError


@dataclass(frozen=True)
class SessionSummary:
    """Short description of one open session, embedded in anomaly payloads."""

    attendance_id: int
    work_date: str
    check_in_at: datetime

    def to_dict(self) -> dict:
        return {"id": self.attendance_id, "date": self.work_date, "checkInAt": self.check_in_at}


@dataclass(frozen=True)
class AnomalyLogEntry:
    """Write-once audit entry for a session anomaly."""

    anomaly_type: AnomalyType
    user_id: int
    details: dict
    created_at: datetime
    anomaly_id: Optional[int] = None

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(days=ANOMALY_RETENTION_DAYS)


def _require_instant(value: Any, message: str) -> datetime:
    instant = normalize_instant(value)
    if instant is None:
        raise AnomalyValidationError(message)
    return instant


def _validate_stale_open_session(details: dict) -> dict:
    session_date = details.get("sessionDate")
    if not is_valid_date_key(session_date):
        raise AnomalyValidationError("STALE_OPEN_SESSION requires details.sessionDate (YYYY-MM-DD format)")

    check_in_at = _require_instant(
        details.get("checkInAt"),
        "STALE_OPEN_SESSION requires details.checkInAt (valid datetime or ISO string)",
    )

    detected_at = details.get("detectedAt")
    if isinstance(detected_at, DetectedAt):
        detected_at = detected_at.value
    if not isinstance(detected_at, str) or detected_at not in {d.value for d in DetectedAt}:
        raise AnomalyValidationError('STALE_OPEN_SESSION requires details.detectedAt ("checkIn" or "checkOut")')

    return {"sessionDate": session_date, "checkInAt": check_in_at, "detectedAt": detected_at}


def _validate_multiple_active_sessions(details: dict) -> dict:
    count = details.get("sessionCount")
    if isinstance(count, bool) or not isinstance(count, int) or count < 2:
        raise AnomalyValidationError("MULTIPLE_ACTIVE_SESSIONS requires details.sessionCount (int >= 2)")

    sessions = details.get("sessions")
    if not isinstance(sessions, (list, tuple)) or not sessions:
        raise AnomalyValidationError("MULTIPLE_ACTIVE_SESSIONS requires details.sessions (non-empty list)")
    if len(sessions) > ANOMALY_SESSION_SUMMARY_LIMIT:
        raise AnomalyValidationError(
            f"MULTIPLE_ACTIVE_SESSIONS details.sessions exceeds max length ({ANOMALY_SESSION_SUMMARY_LIMIT})"
        )

    normalized = []
    for session in sessions:
        if isinstance(session, SessionSummary):
            session = session.to_dict()
        if not isinstance(session, dict):
            raise AnomalyValidationError("MULTIPLE_ACTIVE_SESSIONS sessions must be objects")
        session_id = session.get("id", session.get("_id"))
        if session_id is None:
            raise AnomalyValidationError("MULTIPLE_ACTIVE_SESSIONS sessions must have id")
        if not is_valid_date_key(session.get("date")):
            raise AnomalyValidationError("MULTIPLE_ACTIVE_SESSIONS sessions must have date (YYYY-MM-DD format)")
        check_in_at = _require_instant(
            session.get("checkInAt"),
            "MULTIPLE_ACTIVE_SESSIONS sessions checkInAt must be a valid datetime or ISO string",
        )
        normalized.append({"id": session_id, "date": session["date"], "checkInAt": check_in_at})

    return {"sessionCount": count, "sessions": normalized}


_VALIDATORS = {
    AnomalyType.STALE_OPEN_SESSION: _validate_stale_open_session,
    AnomalyType.MULTIPLE_ACTIVE_SESSIONS: _validate_multiple_active_sessions,
}


def validate_details(anomaly_type: Any, details: Any) -> tuple[AnomalyType, dict]:
    """Check a payload against its type and return the normalized copy."""
    try:
        kind = AnomalyType(anomaly_type)
    except ValueError:
        raise AnomalyValidationError(f"Unknown anomaly type: {anomaly_type!r}")

    if not isinstance(details, dict):
        raise AnomalyValidationError("Anomaly details are required and must be an object")

    return kind, _VALIDATORS[kind](details)


def build_anomaly_entry(anomaly_type: Any, user_id: int, details: Any, *, created_at: datetime) -> AnomalyLogEntry:
    kind, normalized = validate_details(anomaly_type, details)
    return AnomalyLogEntry(
        anomaly_type=kind,
        user_id=int(user_id),
        details=normalized,
        created_at=normalize_instant(created_at),
    )
