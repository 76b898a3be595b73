from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..common.money import to_money
from ..common.validators import optional_text, require_date_range, require_non_empty
from ..core.enums import BulkPayrollItemStatus, BulkPayrollStatus, Permission, Role
from ..core.exceptions import ConflictError, DomainError, NotFoundError, ValidationError
from ..payroll.service import PayrollService
from ..permissions.service import PermissionService
from ..profiles.repository import ProfileRepository
from .model import BulkPayroll, BulkPayrollItem
from .repository import BulkPayrollRepository

logger = logging.getLogger(__name__)


class BulkPayrollService:
    """Use case: create payroll for many team members in one batch.

    Each team member is processed independently: a failure marks that item
    failed with its message and the batch carries on.
    """

    def __init__(
        self,
        batches: BulkPayrollRepository,
        payroll: PayrollService,
        profiles: ProfileRepository,
        permissions: PermissionService,
    ):
        self._batches = batches
        self._payroll = payroll
        self._profiles = profiles
        self._permissions = permissions

    def _process_item(self, batch: BulkPayroll, item: BulkPayrollItem) -> tuple[int, Decimal]:
        profile = self._profiles.get_by_id(item.profile_id)
        if not profile:
            raise ValidationError("Team member not found")
        start, end = batch.pay_period_start, batch.pay_period_end
        if self._payroll.find_overlaps([profile.profile_id], start, end):
            raise ConflictError("Payroll already exists for an overlapping period")

        rows = self._payroll.eligible_hours(profile.profile_id, start, end)
        if not rows:
            raise ValidationError("No approved, unpaid working hours in this period")

        calculator, fallback_rate = self._payroll.calculator_for(profile)
        breakdown = calculator.calculate(rows, fallback_rate=fallback_rate)
        payroll_id = self._payroll.create_from_breakdown(
            profile_id=profile.profile_id,
            start=start,
            end=end,
            breakdown=breakdown,
            bank_account_id=None,
        )
        return payroll_id, breakdown.net_pay

    def run(
        self,
        *,
        current_role: Role,
        name: str,
        profile_ids: Sequence[int],
        start: Optional[date],
        end: Optional[date],
        created_by: int,
        description: Optional[str] = None,
    ) -> BulkPayroll:
        self._permissions.require(current_role, Permission.PAYROLL_MANAGE)
        name = require_non_empty(name, "Batch name")
        profile_ids = list(dict.fromkeys(int(p) for p in profile_ids))
        if not profile_ids:
            raise ValidationError("Select at least one team member")
        if start is None or end is None:
            raise ValidationError("Pay period start and end are required")
        require_date_range(start, end, label="Pay period end")

        bulk_payroll_id = self._batches.create_batch(
            values={
                "name": name,
                "description": optional_text(description),
                "pay_period_start": start,
                "pay_period_end": end,
                "status": BulkPayrollStatus.PROCESSING.value,
                "total_records": len(profile_ids),
                "processed_records": 0,
                "total_amount": Decimal("0.00"),
                "created_by": int(created_by),
            },
            profile_ids=profile_ids,
        )
        batch = self.get_batch(bulk_payroll_id)

        processed = 0
        total_amount = Decimal("0.00")
        for item in batch.items:
            try:
                payroll_id, net_pay = self._process_item(batch, item)
            except DomainError as e:
                self._batches.update_item(
                    item.item_id,
                    changes={"status": BulkPayrollItemStatus.FAILED.value, "error_message": str(e)},
                )
                continue
            except Exception as e:
                logger.exception("Bulk payroll %s: profile %s failed", bulk_payroll_id, item.profile_id)
                self._batches.update_item(
                    item.item_id,
                    changes={"status": BulkPayrollItemStatus.FAILED.value, "error_message": str(e) or "Unexpected error"},
                )
                continue

            self._batches.update_item(
                item.item_id,
                changes={"status": BulkPayrollItemStatus.PROCESSED.value, "payroll_id": payroll_id},
            )
            processed += 1
            total_amount += net_pay

        status = BulkPayrollStatus.COMPLETED if processed else BulkPayrollStatus.FAILED
        self._batches.update_batch(
            bulk_payroll_id,
            changes={
                "status": status.value,
                "processed_records": processed,
                "total_amount": to_money(total_amount),
            },
        )
        logger.info(
            "Bulk payroll %s %s: %d/%d processed, total %s",
            bulk_payroll_id,
            status.value,
            processed,
            len(profile_ids),
            to_money(total_amount),
        )
        return self.get_batch(bulk_payroll_id)

    def list_batches(self) -> Sequence[BulkPayroll]:
        return self._batches.list_batches()

    def get_batch(self, bulk_payroll_id: int) -> BulkPayroll:
        batch = self._batches.get_batch(int(bulk_payroll_id))
        if not batch:
            raise NotFoundError("Bulk payroll not found")
        return batch
