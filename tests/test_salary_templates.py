from __future__ import annotations

from decimal import Decimal

import pytest

from src.workforce_admin.workforce_admin.core.enums import Role
from src.workforce_admin.workforce_admin.core.exceptions import AuthorizationError, ValidationError
from src.workforce_admin.workforce_admin.salary_templates.service import TemplateInput


def test_defaults_are_applied(container):
    template_id = container.salary_template_service.create_template(
        current_role=Role.ADMIN, data=TemplateInput(name="Standard")
    )

    t = container.salary_template_service.get(template_id)
    assert t.overtime_multiplier == Decimal("1.5")
    assert t.deduction_rate == Decimal("0.1")
    assert t.base_hourly_rate is None


@pytest.mark.parametrize(
    "overrides",
    [
        {"overtime_multiplier": "0.5"},
        {"deduction_percentage": "101"},
        {"base_hourly_rate": "-1"},
        {"name": "  "},
    ],
)
def test_invalid_templates_rejected(container, overrides):
    data = {"name": "Custom"}
    data.update(overrides)

    with pytest.raises(ValidationError):
        container.salary_template_service.create_template(current_role=Role.ADMIN, data=TemplateInput(**data))


def test_employee_cannot_manage_templates(container):
    with pytest.raises(AuthorizationError):
        container.salary_template_service.create_template(current_role=Role.EMPLOYEE, data=TemplateInput(name="Mine"))


def test_resolve_prefers_latest_active_template(container, seed):
    worker = seed.profile("Sam Hill")
    svc = container.salary_template_service
    older = svc.create_template(current_role=Role.ADMIN, data=TemplateInput(name="Old", profile_id=worker))
    newer = svc.create_template(current_role=Role.ADMIN, data=TemplateInput(name="New", profile_id=worker))
    svc.create_template(
        current_role=Role.ADMIN, data=TemplateInput(name="Off", profile_id=worker, is_active=False)
    )

    assert svc.resolve_for_profile(worker).template_id == newer

    svc.update_template(
        current_role=Role.ADMIN,
        template_id=older,
        data=TemplateInput(name="Old", profile_id=worker, base_hourly_rate="41"),
    )
    resolved = svc.resolve_for_profile(worker)
    assert resolved.template_id == older
    assert resolved.base_hourly_rate == Decimal("41.00")


def test_profile_without_template(container, seed):
    assert container.salary_template_service.resolve_for_profile(seed.profile("Kim Ng")) is None
