from datetime import timedelta
from types import SimpleNamespace

import pytest

from src.attendance_core.attendance_core.common.grace_config import GraceConfig, read_int_setting


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 24),
        ("", 24),
        ("   ", 24),
        ("12", 12),
        (" 36 ", 36),
        ("12abc", 24),
        ("12.5", 24),
        ("-3", 24),
        ("0", 24),
        ("49", 24),
        ("1", 1),
        ("48", 48),
        (6, 6),
        (True, 24),
        ("\u0663\u0660", 24),
        ("\uff11\uff12", 24),
    ],
)
def test_read_int_setting(raw, expected):
    assert read_int_setting(raw, 24, minimum=1, maximum=48) == expected


def test_defaults():
    grace = GraceConfig()

    assert grace.checkout_grace == timedelta(hours=24)
    assert grace.checkout_grace_ms == 86_400_000
    assert grace.adjust_request_max == timedelta(days=7)
    assert grace.adjust_request_max_ms == 604_800_000


def test_from_env_reads_both_keys():
    grace = GraceConfig.from_env({"CHECKOUT_GRACE_HOURS": "12", "ADJUST_REQUEST_MAX_DAYS": "30"})

    assert grace.checkout_grace_hours == 12
    assert grace.adjust_request_max_days == 30


def test_from_env_falls_back_per_key():
    grace = GraceConfig.from_env({"CHECKOUT_GRACE_HOURS": "abc", "ADJUST_REQUEST_MAX_DAYS": "31"})

    assert grace == GraceConfig()


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("CHECKOUT_GRACE_HOURS", "8")
    monkeypatch.delenv("ADJUST_REQUEST_MAX_DAYS", raising=False)

    grace = GraceConfig.from_env()

    assert grace.checkout_grace_hours == 8
    assert grace.adjust_request_max_days == 7


def test_from_settings_module():
    settings = SimpleNamespace(CHECKOUT_GRACE_HOURS="48", ADJUST_REQUEST_MAX_DAYS=None)

    grace = GraceConfig.from_settings(settings)

    assert grace.checkout_grace_hours == 48
    assert grace.adjust_request_max_days == 7
