from __future__ import annotations

from datetime import timedelta

import pytest

from gym_checkin.attendance import controller as attendance_controller
from gym_checkin.container import build_service_container
from gym_checkin.main import create_app


@pytest.fixture
def clock(monkeypatch, fixed_now):
    state = {"now": fixed_now}
    monkeypatch.setattr(attendance_controller, "now_utc", lambda: state["now"])
    return state


@pytest.fixture
def client(monkeypatch, sessions, gyms, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(build_service_container(sessions_repo=sessions, gyms_repo=gyms))
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "m1"
    return client


def test_scan_requires_signed_in_member(monkeypatch, sessions, gyms):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(build_service_container(sessions_repo=sessions, gyms_repo=gyms))

    resp = app.test_client().post("/api/scan", json={"code": "g1"})

    assert resp.status_code == 401
    assert sessions.all() == []


def test_scan_json_payload_checks_in_then_out(client, clock, sessions, fixed_now):
    code = '{"gymId": "g1", "type": "check-in"}'

    first = client.post("/api/scan", json={"code": code})
    clock["now"] = fixed_now + timedelta(minutes=65)
    second = client.post("/api/scan", json={"code": code})

    assert first.status_code == 200
    assert first.get_json()["outcome"] == "CHECKED_IN"
    body = second.get_json()
    assert second.status_code == 200
    assert body["success"] is True
    assert body["outcome"] == "CHECKED_OUT"
    assert body["duration_minutes"] == 65
    assert "1h 5m" in body["message"]
    assert sessions.all()[0].gym_id == "g1"


def test_scan_raw_code_is_gym_id(client, sessions):
    resp = client.post("/api/scan", json={"code": "  g1 "})

    assert resp.status_code == 200
    assert sessions.all()[0].gym_id == "g1"


@pytest.mark.parametrize("body", [{}, {"code": ""}, {"code": "   "}, None])
def test_scan_empty_code_is_bad_request(client, body):
    resp = client.post("/api/scan", json=body) if body is not None else client.post("/api/scan")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_failed_scan_returns_conflict_status(monkeypatch, sessions, gyms, clock):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(build_service_container(sessions_repo=sessions, gyms_repo=gyms, require_active_gym=True))
    client = app.test_client()
    with client.session_transaction() as sess:
        sess["user_id"] = "m1"

    resp = client.post("/api/scan", json={"code": "g-closed"})

    assert resp.status_code == 409
    assert resp.get_json()["outcome"] == "FAILED"


def test_history_endpoint(client, clock, fixed_now):
    client.post("/api/scan", json={"code": "g1"})
    clock["now"] = fixed_now + timedelta(minutes=95)
    client.post("/api/scan", json={"code": "g1"})

    resp = client.get("/api/history?limit=10")

    assert resp.status_code == 200
    rows = resp.get_json()["sessions"]
    assert len(rows) == 1
    assert rows[0]["duration"] == "1h 35m"
    assert rows[0]["status"] == "Completed"


def test_gym_qr_image(client):
    resp = client.get("/api/gyms/g1/qr.png")

    assert resp.status_code == 200
    assert resp.mimetype == "image/png"
    assert resp.data[:8] == b"\x89PNG\r\n\x1a\n"
