from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..common.money import to_money
from ..common.validators import optional_text, parse_decimal, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_DEDUCTION_RATE, DEFAULT_OVERTIME_MULTIPLIER
from ..core.enums import Permission, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..permissions.service import PermissionService
from .model import SalaryTemplate
from .repository import SalaryTemplateRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateInput:
    name: str
    profile_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    base_hourly_rate: Any = None
    overtime_multiplier: Any = None
    deduction_percentage: Any = None
    description: Optional[str] = None
    is_active: bool = True


class SalaryTemplateService:
    def __init__(self, templates: SalaryTemplateRepository, permissions: PermissionService):
        self._templates = templates
        self._permissions = permissions

    @staticmethod
    def _clean(data: TemplateInput) -> dict:
        multiplier = parse_decimal(data.overtime_multiplier, "Overtime multiplier", default=DEFAULT_OVERTIME_MULTIPLIER)
        if multiplier < 1:
            raise ValidationError("Overtime multiplier must be at least 1")
        deduction = parse_decimal(
            data.deduction_percentage,
            "Deduction percentage",
            default=DEFAULT_DEDUCTION_RATE * 100,
        )
        if deduction < 0 or deduction > 100:
            raise ValidationError("Deduction percentage must be between 0 and 100")

        rate = None
        if data.base_hourly_rate not in (None, ""):
            rate = require_non_negative(to_money(parse_decimal(data.base_hourly_rate, "Base hourly rate")), "Base hourly rate")

        return {
            "name": require_non_empty(data.name, "Template name"),
            "description": optional_text(data.description),
            "profile_id": data.profile_id,
            "client_id": data.client_id,
            "project_id": data.project_id,
            "bank_account_id": data.bank_account_id,
            "base_hourly_rate": rate,
            "overtime_multiplier": multiplier,
            "deduction_percentage": deduction,
            "is_active": 1 if data.is_active else 0,
        }

    def get(self, template_id: int) -> SalaryTemplate:
        template = self._templates.get_by_id(int(template_id))
        if not template:
            raise NotFoundError("Salary template not found")
        return template

    def create_template(self, *, current_role: Role, data: TemplateInput) -> int:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        template_id = self._templates.create(values=self._clean(data))
        logger.info("Created salary template %s", template_id)
        return template_id

    def update_template(self, *, current_role: Role, template_id: int, data: TemplateInput) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        self.get(template_id)
        self._templates.update(int(template_id), changes=self._clean(data))

    def delete_template(self, *, current_role: Role, template_id: int) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        self.get(template_id)
        self._templates.delete(int(template_id))

    def list_templates(self, *, profile_id: Optional[int] = None) -> Sequence[SalaryTemplate]:
        return self._templates.list_templates(profile_id=profile_id)

    def resolve_for_profile(self, profile_id: int) -> Optional[SalaryTemplate]:
        """The active template of a profile, preferring the most recently updated one."""
        templates = self._templates.list_templates(profile_id=int(profile_id), active_only=True)
        return templates[0] if templates else None
