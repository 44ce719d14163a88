from __future__ import annotations

import pytest

from attendance_payroll.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


def _login(client, user_id, role):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role
        sess["is_active"] = True


def test_login_required(client):
    resp = client.get("/api/periods")
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_employee_cannot_create_period(client):
    _login(client, 2, "employee")
    resp = client.post("/api/periods", json={"name": "Jan", "start_date": "2024-01-01", "end_date": "2024-01-31"})
    assert resp.status_code == 403
    assert resp.get_json()["code"] == "INSUFFICIENT_PERMISSIONS"


def test_period_attendance_and_payroll_flow(client):
    _login(client, 1, "admin")
    resp = client.post("/api/periods", json={"name": "Jan", "start_date": "2024-01-01", "end_date": "2024-01-31"})
    assert resp.status_code == 201
    period_id = resp.get_json()["data"]["period_id"]

    dup = client.post("/api/periods", json={"name": "Again", "start_date": "2024-02-01", "end_date": "2024-02-29"})
    assert dup.status_code == 409
    assert dup.get_json()["code"] == "ACTIVE_PERIOD_EXISTS"

    _login(client, 2, "employee")
    ok = client.post("/api/attendance", json={"attendance_date": "2024-01-15"})
    assert ok.status_code == 201
    weekend = client.post("/api/attendance", json={"attendance_date": "2024-01-13"})
    assert weekend.status_code == 400
    assert weekend.get_json()["code"] == "WEEKEND_NOT_ALLOWED"
    again = client.post("/api/attendance", json={"attendance_date": "2024-01-15"})
    assert again.get_json()["code"] == "ATTENDANCE_ALREADY_EXISTS"

    mine = client.get("/api/attendance/me").get_json()["data"]
    assert mine["summary"] == {"user_id": 2, "period_id": period_id, "attendance_days": 1, "total_working_days": 23}

    _login(client, 1, "admin")
    still_active = client.post(f"/api/periods/{period_id}/payroll", json={})
    assert still_active.get_json()["code"] == "PERIOD_STILL_ACTIVE"

    assert client.post(f"/api/periods/{period_id}/close").status_code == 200
    compiled = client.post(f"/api/periods/{period_id}/payroll", json={"notes": "ok"})
    assert compiled.status_code == 201
    assert compiled.get_json()["data"]["total_amount"] == "13800.00"

    second = client.post(f"/api/periods/{period_id}/payroll", json={})
    assert second.status_code == 409
    assert second.get_json()["code"] == "PAYROLL_ALREADY_PROCESSED"


def test_unknown_period_is_404(client):
    _login(client, 1, "admin")
    resp = client.get("/api/periods/77")
    assert resp.status_code == 404
    assert resp.get_json()["code"] == "PERIOD_NOT_FOUND"


def test_overtime_decision_endpoint(client):
    _login(client, 1, "admin")
    client.post("/api/periods", json={"name": "Jan", "start_date": "2024-01-01", "end_date": "2024-01-31"})

    _login(client, 2, "employee")
    created = client.post(
        "/api/overtime",
        json={"overtime_date": "2024-01-15", "hours_worked": "2.5", "description": "Migration"},
    ).get_json()["data"]
    assert created["status"] == "pending"
    assert created["hours_worked"] == "2.50"

    forbidden = client.post(f"/api/overtime/{created['overtime_id']}/decision", json={"status": "approved"})
    assert forbidden.status_code == 403

    _login(client, 1, "admin")
    decided = client.post(f"/api/overtime/{created['overtime_id']}/decision", json={"status": "approved"})
    assert decided.get_json()["data"]["status"] == "approved"


def test_payslip_endpoints(client):
    _login(client, 1, "admin")
    period_id = client.post(
        "/api/periods", json={"name": "Jan", "start_date": "2024-01-01", "end_date": "2024-01-31"}
    ).get_json()["data"]["period_id"]
    client.post(f"/api/periods/{period_id}/close")

    _login(client, 2, "employee")
    assert client.get(f"/api/periods/{period_id}/payslips/me").get_json()["code"] == "RECORD_NOT_FOUND"

    _login(client, 1, "admin")
    client.post(f"/api/periods/{period_id}/payroll", json={})
    summary = client.get(f"/api/periods/{period_id}/payroll/summary").get_json()["data"]
    assert summary["payroll"]["total_amount"] == "13800.00"
    assert [s["user_id"] for s in summary["payslips"]] == [2, 3]

    _login(client, 2, "employee")
    mine = client.get(f"/api/periods/{period_id}/payslips/me")
    assert mine.status_code == 200
    assert mine.get_json()["data"]["net_pay"] == "4600.00"
    assert client.get(f"/api/periods/{period_id}/payslips/3").status_code == 403
    assert client.get(f"/api/periods/{period_id}/payroll/summary").status_code == 403
