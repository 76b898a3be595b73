from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.workforce_admin.workforce_admin.core.enums import BulkPayrollItemStatus, BulkPayrollStatus, Role
from src.workforce_admin.workforce_admin.core.exceptions import AuthorizationError, ValidationError

START = date(2026, 3, 1)
END = date(2026, 3, 7)


def test_batch_processes_each_member_independently(container, seed):
    client_id, project_id = seed.client_project()
    paid = seed.profile("Sam Hill")
    idle = seed.profile("Kim Ng")
    seed.hours(profile_id=paid, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    admin = seed.profile("Root Admin", role=Role.ADMIN)

    batch = container.bulk_payroll_service.run(
        current_role=Role.ACCOUNTANT,
        name="March week 1",
        profile_ids=[paid, idle],
        start=START,
        end=END,
        created_by=admin,
    )

    assert batch.status == BulkPayrollStatus.COMPLETED
    assert batch.total_records == 2
    assert batch.processed_records == 1
    assert batch.failed_records == 1
    assert batch.total_amount == Decimal("216.00")

    by_profile = {i.profile_id: i for i in batch.items}
    assert by_profile[paid].status == BulkPayrollItemStatus.PROCESSED
    assert by_profile[paid].payroll_id is not None
    assert by_profile[idle].status == BulkPayrollItemStatus.FAILED
    assert "No approved" in by_profile[idle].error_message


def test_overlapping_member_fails_without_stopping_the_batch(container, seed):
    client_id, project_id = seed.client_project()
    first = seed.profile("Sam Hill")
    second = seed.profile("Kim Ng")
    for profile_id in (first, second):
        seed.hours(profile_id=profile_id, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))
    container.payroll_service.generate(current_role=Role.ADMIN, profile_ids=[first], start=START, end=END)

    batch = container.bulk_payroll_service.run(
        current_role=Role.ADMIN,
        name="Retry",
        profile_ids=[first, second],
        start=START,
        end=END,
        created_by=1,
    )

    statuses = {i.profile_id: i.status for i in batch.items}
    assert statuses == {first: BulkPayrollItemStatus.FAILED, second: BulkPayrollItemStatus.PROCESSED}
    assert batch.status == BulkPayrollStatus.COMPLETED


def test_batch_with_no_success_is_failed(container, seed):
    idle = seed.profile("Kim Ng")

    batch = container.bulk_payroll_service.run(
        current_role=Role.ADMIN, name="Empty", profile_ids=[idle, 404], start=START, end=END, created_by=1
    )

    assert batch.status == BulkPayrollStatus.FAILED
    assert batch.processed_records == 0
    assert batch.failed_records == 2
    assert container.bulk_payroll_service.list_batches()[0].bulk_payroll_id == batch.bulk_payroll_id


def test_batch_needs_members_and_a_valid_period(container):
    with pytest.raises(ValidationError):
        container.bulk_payroll_service.run(
            current_role=Role.ADMIN, name="None", profile_ids=[], start=START, end=END, created_by=1
        )
    with pytest.raises(ValidationError):
        container.bulk_payroll_service.run(
            current_role=Role.ADMIN, name="Backwards", profile_ids=[1], start=END, end=START, created_by=1
        )


def test_batch_requires_payroll_permission(container):
    with pytest.raises(AuthorizationError):
        container.bulk_payroll_service.run(
            current_role=Role.OPERATION, name="Nope", profile_ids=[1], start=START, end=END, created_by=1
        )


def test_unexpected_error_fails_only_that_member(container, seed, monkeypatch):
    client_id, project_id = seed.client_project()
    good = seed.profile("Sam Hill")
    bad = seed.profile("Kim Ng")
    for profile_id in (good, bad):
        seed.hours(profile_id=profile_id, client_id=client_id, project_id=project_id, day=date(2026, 3, 2))

    calculator_for = container.payroll_service.calculator_for

    def flaky(profile):
        if profile.profile_id == bad:
            raise RuntimeError("template lookup timed out")
        return calculator_for(profile)

    monkeypatch.setattr(container.payroll_service, "calculator_for", flaky)

    batch = container.bulk_payroll_service.run(
        current_role=Role.ADMIN,
        name="March week 1",
        profile_ids=[good, bad],
        start=START,
        end=END,
        created_by=1,
    )

    assert batch.status == BulkPayrollStatus.COMPLETED
    assert batch.processed_records == 1
    by_profile = {i.profile_id: i for i in batch.items}
    assert by_profile[good].status == BulkPayrollItemStatus.PROCESSED
    assert by_profile[bad].status == BulkPayrollItemStatus.FAILED
    assert by_profile[bad].error_message == "template lookup timed out"
