from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Computed per-day attendance status (never persisted)."""

    ON_TIME = "ON_TIME"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    LATE_AND_EARLY = "LATE_AND_EARLY"
    WORKING = "WORKING"
    MISSING_CHECKOUT = "MISSING_CHECKOUT"
    MISSING_CHECKIN = "MISSING_CHECKIN"
    WEEKEND_OR_HOLIDAY = "WEEKEND_OR_HOLIDAY"
    LEAVE = "LEAVE"
    ABSENT = "ABSENT"
    UNKNOWN = "UNKNOWN"


class SessionState(str, Enum):
    """Lifecycle of a single attendance record."""

    NO_SESSION = "NO_SESSION"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class AnomalyType(str, Enum):
    STALE_OPEN_SESSION = "STALE_OPEN_SESSION"
    MULTIPLE_ACTIVE_SESSIONS = "MULTIPLE_ACTIVE_SESSIONS"


class DetectedAt(str, Enum):
    """Which transition noticed a stale session."""

    CHECK_IN = "checkIn"
    CHECK_OUT = "checkOut"


class AttendanceErrorCode(str, Enum):
    """Stable reason classification for rejected transitions."""

    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    OPEN_SESSION_EXISTS = "OPEN_SESSION_EXISTS"
    MUST_CHECK_IN_FIRST = "MUST_CHECK_IN_FIRST"
    ALREADY_CHECKED_OUT = "ALREADY_CHECKED_OUT"
    SESSION_EXPIRED = "SESSION_EXPIRED"
