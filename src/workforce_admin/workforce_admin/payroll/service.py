from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from ..banking.repository import BankAccountRepository, BankTransactionRepository
from ..common.datetime_utils import now_local
from ..common.money import dsum, to_hours, to_money
from ..common.validators import parse_decimal, require_date_range, require_non_negative
from ..core.enums import (
    NotificationPriority,
    PayrollStatus,
    Permission,
    Role,
    TransactionCategory,
    TransactionType,
    WorkingHoursStatus,
)
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..notifications.service import NotificationInput, NotificationService
from ..permissions.service import PermissionService
from ..profiles.model import Profile
from ..profiles.repository import ProfileRepository
from ..salary_templates.service import SalaryTemplateService
from ..timesheets.model import HoursFilter, WorkingHours
from ..timesheets.repository import WorkingHoursRepository
from .calculator.average_calculator import AverageRatePayrollCalculator
from .calculator.base import PayBreakdown, PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Payroll, PayrollPreview, PayrollPreviewItem, PayrollSummary
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

PAYROLL_CREATED_TYPE = "payroll_created"
ELIGIBLE_HOURS_LIMIT = 10000

_NEXT_STATUS = {
    PayrollStatus.PENDING: PayrollStatus.APPROVED,
    PayrollStatus.APPROVED: PayrollStatus.PAID,
}


@dataclass(frozen=True)
class PayrollChanges:
    total_hours: Any = None
    hourly_rate: Any = None
    deductions: Any = None
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    bank_account_id: Optional[int] = None


class PayrollService:
    """Use case: build payroll records from approved working hours and move them to paid."""

    def __init__(
        self,
        payrolls: PayrollRepository,
        hours: WorkingHoursRepository,
        profiles: ProfileRepository,
        templates: SalaryTemplateService,
        accounts: BankAccountRepository,
        transactions: BankTransactionRepository,
        notifications: NotificationService,
        permissions: PermissionService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payrolls = payrolls
        self._hours = hours
        self._profiles = profiles
        self._templates = templates
        self._accounts = accounts
        self._transactions = transactions
        self._notifications = notifications
        self._permissions = permissions
        self._clock = clock

    def _profile(self, profile_id: int) -> Profile:
        profile = self._profiles.get_by_id(int(profile_id))
        if not profile:
            raise ValidationError(f"Team member {profile_id} not found")
        return profile

    def get(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if not payroll:
            raise NotFoundError("Payroll not found")
        return payroll

    def calculator_for(self, profile: Profile) -> tuple[PayrollCalculator, Decimal]:
        """Calculator and fallback hourly rate, taking the profile's active salary template into account."""
        template = self._templates.resolve_for_profile(profile.profile_id)
        if template is None:
            return StandardPayrollCalculator(), profile.hourly_rate
        calculator = StandardPayrollCalculator(
            overtime_multiplier=template.overtime_multiplier,
            deduction_rate=template.deduction_rate,
        )
        return calculator, template.base_hourly_rate if template.base_hourly_rate is not None else profile.hourly_rate

    def eligible_hours(self, profile_id: int, start: date, end: date) -> Sequence[WorkingHours]:
        """Approved rows of the profile inside [start, end] that no payroll has claimed yet."""
        rows = self._hours.list_hours(
            HoursFilter(
                profile_id=int(profile_id),
                status=WorkingHoursStatus.APPROVED,
                start=start,
                end=end,
                unlinked_only=True,
                limit=ELIGIBLE_HOURS_LIMIT,
            )
        )
        return sorted(rows, key=lambda r: (r.work_date, r.start_time))

    def find_overlaps(self, profile_ids: Sequence[int], start: date, end: date) -> Sequence[Payroll]:
        if not profile_ids:
            return []
        return self._payrolls.find_overlapping([int(p) for p in profile_ids], start, end)

    @staticmethod
    def _check_period(profile_ids: Sequence[int], start: Optional[date], end: Optional[date]) -> None:
        if not profile_ids:
            raise ValidationError("Select at least one team member")
        if start is None or end is None:
            raise ValidationError("Pay period start and end are required")
        require_date_range(start, end, label="Pay period end")

    def preview(self, *, current_role: Role, profile_ids: Sequence[int], start: date, end: date) -> PayrollPreview:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        self._check_period(profile_ids, start, end)

        items: list[PayrollPreviewItem] = []
        for profile_id in dict.fromkeys(int(p) for p in profile_ids):
            profile = self._profile(profile_id)
            rows = self.eligible_hours(profile_id, start, end)
            calculator, fallback_rate = self.calculator_for(profile)
            breakdown = calculator.calculate(rows, fallback_rate=fallback_rate)
            if breakdown.total_hours <= 0:
                continue
            items.append(
                PayrollPreviewItem(
                    profile_id=profile.profile_id,
                    profile_name=profile.full_name,
                    breakdown=breakdown,
                    rows=tuple(rows),
                )
            )
        return PayrollPreview(items=items, overlaps=self.find_overlaps(profile_ids, start, end))

    def create_from_breakdown(
        self,
        *,
        profile_id: int,
        start: date,
        end: date,
        breakdown: PayBreakdown,
        bank_account_id: Optional[int],
    ) -> int:
        """Insert a pending payroll and link the timesheet rows the breakdown was built from."""
        values = {
            "profile_id": int(profile_id),
            "pay_period_start": start,
            "pay_period_end": end,
            "total_hours": breakdown.total_hours,
            "hourly_rate": breakdown.hourly_rate,
            "gross_pay": breakdown.gross_pay,
            "deductions": breakdown.deductions,
            "net_pay": breakdown.net_pay,
            "status": PayrollStatus.PENDING.value,
            "bank_account_id": bank_account_id,
        }
        return self._payrolls.create(values=values, working_hours_ids=breakdown.working_hours_ids)

    def _notify_created(
        self,
        *,
        payroll_id: int,
        profile_id: int,
        start: date,
        end: date,
        net_pay: Decimal,
        sender_profile_id: Optional[int],
    ) -> None:
        try:
            self._notifications.notify(
                NotificationInput(
                    recipient_ids=[profile_id],
                    title="New Payroll Created",
                    message=(
                        f"Your payroll for period {start:%Y-%m-%d} to {end:%Y-%m-%d} has been created. "
                        f"Net amount: ${net_pay:.2f}"
                    ),
                    type=PAYROLL_CREATED_TYPE,
                    priority=NotificationPriority.MEDIUM.value,
                    related_id=payroll_id,
                ),
                sender_profile_id=sender_profile_id,
            )
        except Exception:
            logger.exception("Could not notify profile %s about payroll %s", profile_id, payroll_id)

    def _check_account(self, bank_account_id: Optional[int]) -> None:
        if bank_account_id is not None and not self._accounts.get_by_id(int(bank_account_id)):
            raise ValidationError("Bank account not found")

    def generate(
        self,
        *,
        current_role: Role,
        profile_ids: Sequence[int],
        start: date,
        end: date,
        bank_account_id: Optional[int] = None,
        sender_profile_id: Optional[int] = None,
    ) -> list[int]:
        preview = self.preview(current_role=current_role, profile_ids=profile_ids, start=start, end=end)
        if preview.has_overlaps:
            names = ", ".join(sorted({p.profile_name or str(p.profile_id) for p in preview.overlaps}))
            raise ConflictError(f"Payroll already exists for an overlapping period: {names}")
        if not preview.items:
            raise ValidationError("No approved, unpaid working hours in this period")
        self._check_account(bank_account_id)

        created: list[int] = []
        for item in preview.items:
            payroll_id = self.create_from_breakdown(
                profile_id=item.profile_id,
                start=start,
                end=end,
                breakdown=item.breakdown,
                bank_account_id=bank_account_id,
            )
            created.append(payroll_id)
            self._notify_created(
                payroll_id=payroll_id,
                profile_id=item.profile_id,
                start=start,
                end=end,
                net_pay=item.breakdown.net_pay,
                sender_profile_id=sender_profile_id,
            )
        logger.info("Generated %d payroll(s) for %s..%s", len(created), start, end)
        return created

    def create_manual(
        self,
        *,
        current_role: Role,
        profile_id: int,
        start: date,
        end: date,
        deductions: Any = None,
        bank_account_id: Optional[int] = None,
    ) -> int:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        self._check_period([profile_id], start, end)
        profile = self._profile(profile_id)
        self._check_account(bank_account_id)

        if self.find_overlaps([profile.profile_id], start, end):
            raise ConflictError(f"Payroll already exists for an overlapping period: {profile.full_name}")
        rows = self.eligible_hours(profile.profile_id, start, end)
        if not rows:
            raise ValidationError("No approved, unpaid working hours in this period")

        breakdown = AverageRatePayrollCalculator().calculate(rows, fallback_rate=profile.hourly_rate)
        deduction = require_non_negative(
            to_money(parse_decimal(deductions, "Deductions", default=Decimal(0))),
            "Deductions",
        )
        net = breakdown.gross_pay - deduction
        if net < 0:
            raise ValidationError("Deductions cannot exceed gross pay")

        payroll_id = self.create_from_breakdown(
            profile_id=profile.profile_id,
            start=start,
            end=end,
            breakdown=replace(breakdown, deductions=deduction, net_pay=net),
            bank_account_id=bank_account_id,
        )
        logger.info("Created payroll %s for profile %s", payroll_id, profile.profile_id)
        return payroll_id

    def update(self, *, current_role: Role, payroll_id: int, changes: PayrollChanges) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        payroll = self.get(payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise ValidationError("Paid payrolls cannot be edited")

        hours = to_hours(parse_decimal(changes.total_hours, "Total hours", default=payroll.total_hours))
        rate = to_money(parse_decimal(changes.hourly_rate, "Hourly rate", default=payroll.hourly_rate))
        deduction = to_money(parse_decimal(changes.deductions, "Deductions", default=payroll.deductions))
        require_non_negative(hours, "Total hours")
        require_non_negative(rate, "Hourly rate")
        require_non_negative(deduction, "Deductions")

        gross = payroll.gross_pay
        if hours != payroll.total_hours or rate != payroll.hourly_rate:
            gross = to_money(hours * rate)
        net = gross - deduction
        if net < 0:
            raise ValidationError("Net pay cannot be negative")

        start = changes.pay_period_start or payroll.pay_period_start
        end = changes.pay_period_end or payroll.pay_period_end
        require_date_range(start, end, label="Pay period end")
        if (start, end) != (payroll.pay_period_start, payroll.pay_period_end):
            clashes = [
                p for p in self.find_overlaps([payroll.profile_id], start, end) if p.payroll_id != payroll.payroll_id
            ]
            if clashes:
                raise ConflictError("Payroll already exists for an overlapping period")
        self._check_account(changes.bank_account_id)

        self._payrolls.update(
            payroll.payroll_id,
            changes={
                "total_hours": hours,
                "hourly_rate": rate,
                "gross_pay": gross,
                "deductions": deduction,
                "net_pay": net,
                "pay_period_start": start,
                "pay_period_end": end,
                "bank_account_id": changes.bank_account_id
                if changes.bank_account_id is not None
                else payroll.bank_account_id,
            },
        )

    def recalculate_from_linked(self, *, current_role: Role, payroll_id: int) -> Payroll:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        payroll = self.get(payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise ValidationError("Paid payrolls cannot be edited")

        rows = self._hours.list_by_ids(self._payrolls.linked_working_hours_ids(payroll.payroll_id))
        if not rows:
            raise ValidationError("This payroll has no linked working hours")
        profile = self._profile(payroll.profile_id)
        breakdown = AverageRatePayrollCalculator().calculate(rows, fallback_rate=profile.hourly_rate)
        net = breakdown.gross_pay - payroll.deductions
        if net < 0:
            raise ValidationError("Net pay cannot be negative")

        self._payrolls.update(
            payroll.payroll_id,
            changes={
                "total_hours": breakdown.total_hours,
                "hourly_rate": breakdown.hourly_rate,
                "gross_pay": breakdown.gross_pay,
                "net_pay": net,
            },
        )
        return self.get(payroll.payroll_id)

    def approve(self, *, current_role: Role, payroll_id: int) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_PROCESS)
        payroll = self.get(payroll_id)
        if _NEXT_STATUS.get(payroll.status) != PayrollStatus.APPROVED:
            raise ValidationError("Only pending payrolls can be approved")
        self._payrolls.update(payroll.payroll_id, changes={"status": PayrollStatus.APPROVED.value})

    def _payout_account(self, payroll: Payroll, bank_account_id: Optional[int]) -> Optional[int]:
        if bank_account_id is not None:
            self._check_account(bank_account_id)
            return int(bank_account_id)
        if payroll.bank_account_id is not None:
            return payroll.bank_account_id
        primary = next((a for a in self._accounts.list_accounts(company_only=True) if a.is_primary), None)
        return primary.account_id if primary else None

    def mark_paid(self, *, current_role: Role, payroll_id: int, bank_account_id: Optional[int] = None) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_PROCESS)
        payroll = self.get(payroll_id)
        if _NEXT_STATUS.get(payroll.status) != PayrollStatus.PAID:
            raise ValidationError("Only approved payrolls can be marked as paid")

        account_id = self._payout_account(payroll, bank_account_id)
        self._payrolls.update(
            payroll.payroll_id,
            changes={"status": PayrollStatus.PAID.value, "bank_account_id": account_id},
        )

        linked = self._payrolls.linked_working_hours_ids(payroll.payroll_id)
        if linked:
            self._hours.set_status(linked, WorkingHoursStatus.PAID)

        self._transactions.create(
            values={
                "description": (
                    f"Salary payment - {payroll.profile_name or payroll.profile_id} "
                    f"({payroll.pay_period_start:%Y-%m-%d} to {payroll.pay_period_end:%Y-%m-%d})"
                ),
                "amount": payroll.net_pay,
                "type": TransactionType.WITHDRAWAL.value,
                "category": TransactionCategory.SALARY.value,
                "date": self._clock().date(),
                "bank_account_id": account_id,
                "profile_id": payroll.profile_id,
            }
        )
        logger.info("Payroll %s paid (%s rows, account %s)", payroll.payroll_id, len(linked), account_id)

    def delete(self, *, current_role: Role, payroll_id: int) -> None:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        payroll = self.get(payroll_id)
        if payroll.status == PayrollStatus.PAID:
            raise ValidationError("Paid payrolls cannot be deleted")
        self._payrolls.delete(payroll.payroll_id)
        logger.info("Deleted payroll %s", payroll.payroll_id)

    def list_payrolls(
        self,
        *,
        status: Optional[PayrollStatus] = None,
        profile_id: Optional[int] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Payroll]:
        return self._payrolls.list_payrolls(status=status, profile_id=profile_id, search=search, start=start, end=end)

    def linked_hours(self, payroll_id: int) -> Sequence[WorkingHours]:
        return self._hours.list_by_ids(self._payrolls.linked_working_hours_ids(int(payroll_id)))

    @staticmethod
    def summary(payrolls: Sequence[Payroll]) -> PayrollSummary:
        return PayrollSummary(
            total_gross=to_money(dsum(p.gross_pay for p in payrolls)),
            total_net=to_money(dsum(p.net_pay for p in payrolls)),
            total_deductions=to_money(dsum(p.deductions for p in payrolls)),
            pending_count=sum(1 for p in payrolls if p.status == PayrollStatus.PENDING),
            approved_count=sum(1 for p in payrolls if p.status == PayrollStatus.APPROVED),
            paid_count=sum(1 for p in payrolls if p.status == PayrollStatus.PAID),
        )
