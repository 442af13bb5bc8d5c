"""Timing rules for attendance adjustment requests.

The request workflow lives elsewhere; it calls this before accepting a
correction so that corrected sessions obey the same grace window as live
check-outs.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from ..common.datetime_utils import normalize_instant, to_date_key
from ..common.grace_config import GraceConfig
from ..core.exceptions import ValidationError

FUTURE_TOLERANCE = timedelta(minutes=1)


def _instant(value: Any, field_name: str) -> Optional[datetime]:
    if value is None:
        return None
    instant = normalize_instant(value)
    if instant is None:
        raise ValidationError(f"{field_name} is invalid")
    return instant


def validate_adjustment_window(
    *,
    anchor_check_in: Any,
    requested_check_out: Any = None,
    now: datetime,
    grace: GraceConfig,
) -> None:
    """Validate a correction anchored on ``anchor_check_in``.

    1. Session length (check-out minus check-in) must not exceed the
       checkout grace period.
    2. The request must be submitted within the adjustment window counted
       from check-in.

    A check-out must also fall after check-in, and may be in the future only
    when the session crosses midnight.
    """
    check_in = _instant(anchor_check_in, "checkInAt")
    check_out = _instant(requested_check_out, "checkOutAt")
    now = normalize_instant(now)

    if check_in is None:
        if check_out is not None:
            raise ValidationError("Cannot validate checkout without check-in reference")
        return

    if check_in > now + FUTURE_TOLERANCE:
        raise ValidationError("checkInAt cannot be in the future")

    if now - check_in > grace.adjust_request_max:
        raise ValidationError(f"Cannot submit request >{grace.adjust_request_max_days} days after check-in")

    if check_out is None:
        return

    if check_out <= check_in:
        raise ValidationError("checkOutAt must be after check-in")

    crosses_midnight = to_date_key(check_out) > to_date_key(check_in)
    if not crosses_midnight and check_out > now + FUTURE_TOLERANCE:
        raise ValidationError("checkOutAt cannot be in the future")

    if check_out - check_in > grace.checkout_grace:
        raise ValidationError(f"Session length exceeds {grace.checkout_grace_hours}h limit")
