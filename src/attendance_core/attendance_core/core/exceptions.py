from __future__ import annotations

from .enums import AttendanceErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AnomalyValidationError(ValidationError):
    """Raised when an anomaly payload does not match its type."""


class AttendanceError(DomainError):
    """Rejected check-in/check-out, with a stable reason code."""

    _DEFAULT_MESSAGES = {
        AttendanceErrorCode.ALREADY_CHECKED_IN: "Already checked in",
        AttendanceErrorCode.OPEN_SESSION_EXISTS: "You have an open session. Please check out first",
        AttendanceErrorCode.MUST_CHECK_IN_FIRST: "Must check in first",
        AttendanceErrorCode.ALREADY_CHECKED_OUT: "Already checked out",
        AttendanceErrorCode.SESSION_EXPIRED: "Session expired. Please contact admin to adjust your attendance",
    }

    def __init__(self, reason: AttendanceErrorCode, message: str | None = None):
        self.reason = reason
        super().__init__(message or self._DEFAULT_MESSAGES[reason])


class DuplicateAttendanceError(Exception):
    """Raised by repositories when (user, date) already has a record."""
