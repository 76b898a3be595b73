from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import BulkPayrollItemStatus, BulkPayrollStatus


@dataclass(frozen=True)
class BulkPayrollItem:
    item_id: int
    bulk_payroll_id: int
    profile_id: int
    status: BulkPayrollItemStatus = BulkPayrollItemStatus.PENDING
    payroll_id: Optional[int] = None
    error_message: Optional[str] = None
    profile_name: Optional[str] = None


@dataclass(frozen=True)
class BulkPayroll:
    """A batch run creating payroll for many team members over one pay period."""

    bulk_payroll_id: int
    name: str
    pay_period_start: date
    pay_period_end: date
    created_by: int
    status: BulkPayrollStatus = BulkPayrollStatus.DRAFT
    description: Optional[str] = None
    total_records: int = 0
    processed_records: int = 0
    total_amount: Decimal = Decimal("0.00")
    created_at: Optional[datetime] = None
    items: Sequence[BulkPayrollItem] = field(default_factory=tuple)

    @property
    def failed_records(self) -> int:
        return sum(1 for i in self.items if i.status == BulkPayrollItemStatus.FAILED)
