from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping, Optional

from ..core.constants import (
    DEFAULT_ADJUST_REQUEST_MAX_DAYS,
    DEFAULT_CHECKOUT_GRACE_HOURS,
    MAX_ADJUST_REQUEST_MAX_DAYS,
    MAX_CHECKOUT_GRACE_HOURS,
    MIN_ADJUST_REQUEST_MAX_DAYS,
    MIN_CHECKOUT_GRACE_HOURS,
)

_DIGITS_RE = re.compile(r"^[0-9]+$")

CHECKOUT_GRACE_HOURS_KEY = "CHECKOUT_GRACE_HOURS"
ADJUST_REQUEST_MAX_DAYS_KEY = "ADJUST_REQUEST_MAX_DAYS"


def read_int_setting(raw: Any, default: int, *, minimum: int, maximum: int) -> int:
    """Parse a non-negative integer setting, falling back to ``default``.

    Missing or empty values, anything that is not plain digits ("12abc",
    "12.5", "-3") and values outside ``[minimum, maximum]`` all yield the
    default.
    """
    if raw is None:
        return default
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        if not _DIGITS_RE.match(text):
            return default
        value = int(text)
    if value < minimum or value > maximum:
        return default
    return value


@dataclass(frozen=True)
class GraceConfig:
    """Session grace period and adjustment submission window.

    Built once at process start and passed into the services that need it.
    """

    checkout_grace_hours: int = DEFAULT_CHECKOUT_GRACE_HOURS
    adjust_request_max_days: int = DEFAULT_ADJUST_REQUEST_MAX_DAYS

    @classmethod
    def from_values(cls, *, checkout_grace_hours: Any = None, adjust_request_max_days: Any = None) -> "GraceConfig":
        return cls(
            checkout_grace_hours=read_int_setting(
                checkout_grace_hours,
                DEFAULT_CHECKOUT_GRACE_HOURS,
                minimum=MIN_CHECKOUT_GRACE_HOURS,
                maximum=MAX_CHECKOUT_GRACE_HOURS,
            ),
            adjust_request_max_days=read_int_setting(
                adjust_request_max_days,
                DEFAULT_ADJUST_REQUEST_MAX_DAYS,
                minimum=MIN_ADJUST_REQUEST_MAX_DAYS,
                maximum=MAX_ADJUST_REQUEST_MAX_DAYS,
            ),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GraceConfig":
        env = os.environ if environ is None else environ
        return cls.from_values(
            checkout_grace_hours=env.get(CHECKOUT_GRACE_HOURS_KEY),
            adjust_request_max_days=env.get(ADJUST_REQUEST_MAX_DAYS_KEY),
        )

    @classmethod
    def from_settings(cls, settings: Any) -> "GraceConfig":
        return cls.from_values(
            checkout_grace_hours=getattr(settings, CHECKOUT_GRACE_HOURS_KEY, None),
            adjust_request_max_days=getattr(settings, ADJUST_REQUEST_MAX_DAYS_KEY, None),
        )

    @property
    def checkout_grace(self) -> timedelta:
        return timedelta(hours=self.checkout_grace_hours)

    @property
    def checkout_grace_ms(self) -> int:
        return self.checkout_grace_hours * 60 * 60 * 1000

    @property
    def adjust_request_max(self) -> timedelta:
        return timedelta(days=self.adjust_request_max_days)

    @property
    def adjust_request_max_ms(self) -> int:
        return self.adjust_request_max_days * 24 * 60 * 60 * 1000
