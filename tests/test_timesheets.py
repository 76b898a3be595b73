from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

from src.workforce_admin.workforce_admin.core.enums import Role, WorkingHoursStatus
from src.workforce_admin.workforce_admin.core.exceptions import AuthorizationError, ConflictError, ValidationError
from src.workforce_admin.workforce_admin.timesheets.model import HoursFilter
from src.workforce_admin.workforce_admin.timesheets.service import HoursInput, calculate_amounts


def _hours_input(profile_id, client_id, project_id, **overrides) -> HoursInput:
    data = {
        "profile_id": profile_id,
        "client_id": client_id,
        "project_id": project_id,
        "work_date": date(2026, 3, 2),
        "start_time": time(9, 0),
        "end_time": time(17, 0),
    }
    data.update(overrides)
    return HoursInput(**data)


def test_amounts_use_actual_hours_when_signed():
    out = calculate_amounts(
        start_time=time(9, 0),
        end_time=time(17, 0),
        sign_in_time=time(8, 30),
        sign_out_time=time(18, 0),
        hourly_rate=Decimal("30"),
    )

    assert out["total_hours"] == Decimal("8.00")
    assert out["actual_hours"] == Decimal("9.50")
    assert out["overtime_hours"] == Decimal("1.50")
    assert out["payable_amount"] == Decimal("285.00")


def test_amounts_use_scheduled_hours_without_sign_times():
    out = calculate_amounts(
        start_time=time(9, 0),
        end_time=time(13, 30),
        sign_in_time=None,
        sign_out_time=None,
        hourly_rate=Decimal("30"),
    )

    assert out["actual_hours"] == Decimal("0.00")
    assert out["overtime_hours"] == Decimal("0.00")
    assert out["payable_amount"] == Decimal("135.00")


def test_employee_logs_own_hours_at_profile_rate(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill", rate="28.00")

    row_id = container.timesheet_service.log_hours(
        current_role=Role.EMPLOYEE,
        current_profile_id=worker,
        data=_hours_input(worker, client_id, project_id),
    )

    row = container.timesheet_service.get(row_id)
    assert row.status == WorkingHoursStatus.PENDING
    assert row.hourly_rate == Decimal("28.00")
    assert row.payable_amount == Decimal("224.00")


def test_employee_cannot_log_for_someone_else(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    other = seed.profile("Kim Ng")

    with pytest.raises(AuthorizationError):
        container.timesheet_service.log_hours(
            current_role=Role.EMPLOYEE,
            current_profile_id=worker,
            data=_hours_input(other, client_id, project_id),
        )


def test_project_must_belong_to_client(container, seed):
    client_id, _ = seed.client_project()
    _, other_project = seed.client_project(company="Acme", project="Warehouse")
    worker = seed.profile("Sam Hill")

    with pytest.raises(ValidationError):
        container.timesheet_service.log_hours(
            current_role=Role.OPERATION,
            current_profile_id=worker,
            data=_hours_input(worker, client_id, other_project),
        )


@pytest.mark.parametrize("rate", ["Infinity", "NaN", "sNaN", "-inf"])
def test_non_finite_rate_rejected(container, seed, rate):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")

    with pytest.raises(ValidationError):
        container.timesheet_service.log_hours(
            current_role=Role.EMPLOYEE,
            current_profile_id=worker,
            data=_hours_input(worker, client_id, project_id, hourly_rate=rate),
        )


def test_sign_times_must_come_together(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")

    with pytest.raises(ValidationError):
        container.timesheet_service.log_hours(
            current_role=Role.EMPLOYEE,
            current_profile_id=worker,
            data=_hours_input(worker, client_id, project_id, sign_in_time=time(9, 0)),
        )


def test_edit_of_rejected_row_goes_back_to_pending(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        status=WorkingHoursStatus.REJECTED,
    )

    container.timesheet_service.update_hours(
        current_role=Role.EMPLOYEE,
        current_profile_id=worker,
        working_hours_id=row_id,
        data=_hours_input(worker, client_id, project_id, end_time=time(16, 0)),
    )

    row = container.timesheet_service.get(row_id)
    assert row.status == WorkingHoursStatus.PENDING
    assert row.total_hours == Decimal("7.00")


def test_approved_row_cannot_be_edited(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))

    with pytest.raises(ValidationError):
        container.timesheet_service.update_hours(
            current_role=Role.ADMIN,
            current_profile_id=worker,
            working_hours_id=row_id,
            data=_hours_input(worker, client_id, project_id),
        )


def test_row_linked_to_payroll_cannot_be_deleted(container, seed, repos):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    repos["payroll_repo"].create(
        values={
            "profile_id": worker,
            "pay_period_start": date(2026, 3, 1),
            "pay_period_end": date(2026, 3, 7),
            "total_hours": Decimal("8.00"),
            "hourly_rate": Decimal("30.00"),
            "gross_pay": Decimal("240.00"),
            "deductions": Decimal("0.00"),
            "net_pay": Decimal("240.00"),
            "status": "pending",
        },
        working_hours_ids=[row_id],
    )

    with pytest.raises(ConflictError):
        container.timesheet_service.delete_hours(current_role=Role.ADMIN, current_profile_id=worker, working_hours_id=row_id)


def test_employee_deletes_own_pending_row(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        status=WorkingHoursStatus.PENDING,
    )

    container.timesheet_service.delete_hours(current_role=Role.EMPLOYEE, current_profile_id=worker, working_hours_id=row_id)

    assert container.timesheet_service.list_hours(
        current_role=Role.EMPLOYEE, current_profile_id=worker, flt=HoursFilter()
    ) == []


def test_approve_many_skips_rows_that_are_not_pending(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    pending = seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        status=WorkingHoursStatus.PENDING,
    )
    approved = seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 3))

    result = container.timesheet_service.approve_many(current_role=Role.ACCOUNTANT, ids=[pending, approved, 999])

    assert result.done == [pending]
    assert result.skipped == [approved, 999]
    assert container.timesheet_service.get(pending).status == WorkingHoursStatus.APPROVED


def test_reject_requires_pending_row(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))

    with pytest.raises(ValidationError):
        container.timesheet_service.reject(current_role=Role.ACCOUNTANT, working_hours_id=row_id)


def test_employee_cannot_approve(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    row_id = seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        status=WorkingHoursStatus.PENDING,
    )

    with pytest.raises(AuthorizationError):
        container.timesheet_service.approve(current_role=Role.EMPLOYEE, working_hours_id=row_id)


def test_employee_only_sees_own_rows(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    other = seed.profile("Kim Ng")
    seed.hours(profile_id=worker, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    seed.hours(profile_id=other, client_id=client_id, project_id=project_id, day=date(2026, 3, 3))

    mine = container.timesheet_service.list_hours(current_role=Role.EMPLOYEE, current_profile_id=worker, flt=HoursFilter())
    everyone = container.timesheet_service.list_hours(
        current_role=Role.ACCOUNTANT, current_profile_id=worker, flt=HoursFilter()
    )

    assert [r.profile_id for r in mine] == [worker]
    assert [r.work_date for r in everyone] == [date(2026, 3, 3), date(2026, 3, 2)]


def test_totals_count_worked_hours(container, seed):
    client_id, project_id = seed.client_project()
    worker = seed.profile("Sam Hill")
    seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 2),
        sign_in=time(9, 0),
        sign_out=time(18, 0),
    )
    seed.hours(
        profile_id=worker,
        client_id=client_id,
        project_id=project_id,
        day=date(2026, 3, 3),
        status=WorkingHoursStatus.PENDING,
    )

    rows = container.timesheet_service.list_hours(current_role=Role.ADMIN, current_profile_id=worker, flt=HoursFilter())
    totals = container.timesheet_service.totals(rows)

    assert totals.total_hours == Decimal("17.00")
    assert totals.payable_amount == Decimal("510.00")
    assert totals.pending_count == 1
    assert totals.row_count == 2
