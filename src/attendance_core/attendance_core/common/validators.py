from __future__ import annotations

from typing import Any

from ..core.exceptions import ValidationError


def require_user_id(value: Any) -> int:
    try:
        user_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid user id")
    if isinstance(value, bool) or user_id <= 0:
        raise ValidationError("Invalid user id")
    return user_id
