from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from src.workforce_admin.workforce_admin.core.enums import Role, WorkingHoursStatus
from src.workforce_admin.workforce_admin.core.exceptions import ValidationError
from src.workforce_admin.workforce_admin.reports.service import TIMESHEET_CSV_FIELDS


@pytest.fixture
def team(seed):
    client_id, project_id = seed.client_project()
    sam = seed.profile("Sam Hill")
    kim = seed.profile("Kim Ng")
    seed.hours(profile_id=sam, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    seed.hours(
        profile_id=sam,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 3),
        sign_in=time(9, 0),
        sign_out=time(18, 30),
    )
    seed.hours(
        profile_id=kim,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        end=time(13, 0),
        status=WorkingHoursStatus.PENDING,
    )
    seed.hours(
        profile_id=kim,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 4),
        status=WorkingHoursStatus.REJECTED,
    )
    seed.hours(profile_id=kim, client_id=client_id, project_id=project_id, day=date(2026, 2, 20))
    return sam, kim


def test_timesheet_report_rows_and_summary(container, team):
    sam, kim = team

    data = container.report_service.timesheet_report(start=date(2026, 3, 1), end=date(2026, 3, 7))

    assert len(data.rows) == 4
    assert all(list(r) == TIMESHEET_CSV_FIELDS for r in data.rows)
    assert [r["date"] for r in data.rows] == ["2026-03-02", "2026-03-02", "2026-03-03", "2026-03-04"]

    signed = next(r for r in data.rows if r["date"] == "2026-03-03")
    assert signed["sign_in_time"] == "09:00"
    assert signed["actual_hours"] == "9.50"
    assert signed["overtime_hours"] == "1.50"
    assert data.rows[0]["sign_in_time"] == "-"

    assert [s["profile_id"] for s in data.summary] == [sam, kim]
    assert data.summary[0]["total_hours"] == Decimal("17.50")
    assert data.summary[0]["total_payable"] == Decimal("525.00")


def test_timesheet_report_for_one_person(container, team):
    sam, _ = team

    data = container.report_service.timesheet_report(start=date(2026, 3, 1), end=date(2026, 3, 31), profile_id=sam)

    assert {r["full_name"] for r in data.rows} == {"Sam Hill"}
    assert data.rows[0]["client"] == "Harbour Logistics"
    assert data.rows[0]["project"] == "Night shifts"


def test_timesheet_report_rejects_backwards_range(container):
    with pytest.raises(ValidationError):
        container.report_service.timesheet_report(start=date(2026, 3, 7), end=date(2026, 3, 1))


def test_personal_dashboard_skips_rejected_hours(container, team):
    _, kim = team

    personal = container.report_service.personal_dashboard(kim, today=date(2026, 3, 15))

    assert personal.hours_this_month == Decimal("4.00")
    assert personal.payable_this_month == Decimal("120.00")
    assert personal.pending_rows == 1
    assert personal.latest_payroll is None
    assert personal.unread_notifications == 0


def test_dashboard_stats(container, team, seed):
    seed.company_account(opening="750.00")
    container.payroll_service.generate(
        current_role=Role.ADMIN, profile_ids=[team[0]], start=date(2026, 3, 1), end=date(2026, 3, 7)
    )

    stats = container.report_service.dashboard_stats()

    assert stats.active_clients == 1
    assert stats.active_projects == 1
    assert stats.active_profiles == 2
    assert stats.pending_timesheets == 1
    assert stats.pending_payrolls == 1
    assert stats.total_balance == Decimal("750.00")
