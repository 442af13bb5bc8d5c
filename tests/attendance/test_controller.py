from types import SimpleNamespace

import pytest
from flask import Flask

from src.attendance_core.attendance_core.attendance.controller import register


class ExplodingService:
    def check_in(self, user_id):
        raise RuntimeError("db down")


def _client(attendance_service, user_id=1):
    app = Flask(__name__)
    app.secret_key = "test-secret"
    register(app, SimpleNamespace(attendance_service=attendance_service))
    client = app.test_client()
    if user_id is not None:
        with client.session_transaction() as sess:
            sess["user_id"] = user_id
    return client


@pytest.fixture
def client(service):
    return _client(service)


def test_requires_authenticated_user(service):
    resp = _client(service, user_id=None).post("/api/attendance/check-in")

    assert resp.status_code == 401


def test_check_in_then_conflict(client):
    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["date"] == "2026-01-14"

    resp = client.post("/api/attendance/check-in")
    assert resp.status_code == 409
    assert resp.get_json()["reason"] == "OPEN_SESSION_EXISTS"


def test_check_out_without_session(client):
    resp = client.post("/api/attendance/check-out")

    assert resp.status_code == 409
    assert resp.get_json()["reason"] == "MUST_CHECK_IN_FIRST"


def test_check_in_and_out(client):
    client.post("/api/attendance/check-in")

    resp = client.post("/api/attendance/check-out")

    assert resp.status_code == 200
    assert resp.get_json()["attendance"]["checkOutAt"] is not None


def test_today(client):
    client.post("/api/attendance/check-in")

    body = client.get("/api/attendance/today").get_json()

    assert body["date"] == "2026-01-14"
    assert body["status"] == "WORKING"
    assert body["openSession"] is None


def test_history(client):
    client.post("/api/attendance/check-in")

    resp = client.get("/api/attendance/me?month=2026-01")

    assert resp.status_code == 200
    assert [i["date"] for i in resp.get_json()["items"]] == ["2026-01-14"]


def test_history_bad_month(client):
    resp = client.get("/api/attendance/me?month=2026-13")

    assert resp.status_code == 400


def test_unexpected_errors_are_hidden():
    resp = _client(ExplodingService()).post("/api/attendance/check-in")

    assert resp.status_code == 500
    assert resp.get_json() == {"message": "Failed to check in"}
