from __future__ import annotations

from datetime import date

import pytest

from src.workforce_admin.workforce_admin.core.enums import Permission, Role
from src.workforce_admin.workforce_admin.main import create_app
from src.workforce_admin.workforce_admin.notifications.service import NotificationInput
from src.workforce_admin.workforce_admin.reports.service import TIMESHEET_CSV_FIELDS


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container=container)


@pytest.fixture
def client(app):
    return app.test_client()


def _sign_in(client, profile_id: int, role: Role) -> None:
    with client.session_transaction() as sess:
        sess["profile_id"] = profile_id
        sess["name"] = "Tester"
        sess["role"] = role.value


def test_login_sets_session(client, seed):
    profile_id = seed.profile("Ana Lee", role=Role.ACCOUNTANT)

    resp = client.post("/", data={"email": "ana.lee@example.com", "password": "secret123"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")
    with client.session_transaction() as sess:
        assert sess["profile_id"] == profile_id
        assert sess["role"] == "accountant"


def test_login_wrong_password_stays_on_form(client, seed):
    seed.profile("Ana Lee")

    resp = client.post("/", data={"email": "ana.lee@example.com", "password": "wrong"})

    assert resp.status_code == 200
    assert b"Invalid email or password" in resp.data


def test_anonymous_user_is_sent_to_login(client):
    resp = client.get("/profiles")

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/")


def test_employee_gets_403_on_team_page(client, seed):
    worker = seed.profile("Sam Hill")
    _sign_in(client, worker, Role.EMPLOYEE)

    resp = client.get("/profiles")

    assert resp.status_code == 403


def test_client_projects_api(client, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    _sign_in(client, worker, Role.EMPLOYEE)

    resp = client.get(f"/api/clients/{client_id}/projects")

    assert resp.status_code == 200
    assert resp.get_json() == {
        "success": True,
        "projects": [{"id": project_id, "name": "Night shifts", "status": "active"}],
    }


def test_permission_toggle_api(client, container, seed):
    admin = seed.profile("Root Admin", role=Role.ADMIN)
    _sign_in(client, admin, Role.ADMIN)

    resp = client.post(
        "/api/permissions",
        json={"role": "employee", "permission": "payroll_view", "granted": True},
    )

    assert resp.status_code == 200
    assert resp.get_json()["success"] is True
    assert container.permission_service.has_permission(Role.EMPLOYEE, Permission.PAYROLL_VIEW)


def test_permission_toggle_api_rejects_unknown_permission(client, seed):
    admin = seed.profile("Root Admin", role=Role.ADMIN)
    _sign_in(client, admin, Role.ADMIN)

    resp = client.post("/api/permissions", json={"role": "employee", "permission": "fly", "granted": True})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_notification_action_api(client, container, seed):
    worker = seed.profile("Sam Hill")
    container.notification_service.notify(
        NotificationInput(recipient_ids=[worker], title="Shift swap", message="Confirm swap", action_type="confirm")
    )
    n = container.notification_service.inbox(worker)[0]
    _sign_in(client, worker, Role.EMPLOYEE)

    first = client.post(f"/api/notifications/{n.notification_id}/action")
    second = client.post(f"/api/notifications/{n.notification_id}/action")

    assert first.status_code == 200
    assert first.get_json()["success"] is True
    assert second.status_code == 400
    assert second.get_json()["success"] is False


def test_timesheet_csv_export(client, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    accountant = seed.profile("Ana Lee", role=Role.ACCOUNTANT)
    _sign_in(client, accountant, Role.ACCOUNTANT)

    resp = client.get("/reports/timesheets.csv?start=2026-03-01&end=2026-03-07")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(TIMESHEET_CSV_FIELDS)
    assert lines[1].startswith("2026-03-02,")
    assert len(lines) == 2
