from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PayrollStatus
from ..timesheets.model import WorkingHours
from .calculator.base import PayBreakdown


@dataclass(frozen=True)
class Payroll:
    payroll_id: int
    profile_id: int
    pay_period_start: date
    pay_period_end: date
    total_hours: Decimal
    hourly_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollStatus = PayrollStatus.PENDING
    bank_account_id: Optional[int] = None
    profile_name: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollPreviewItem:
    profile_id: int
    profile_name: str
    breakdown: PayBreakdown
    rows: Sequence[WorkingHours] = field(default_factory=tuple)


@dataclass(frozen=True)
class PayrollPreview:
    items: Sequence[PayrollPreviewItem]
    overlaps: Sequence[Payroll]

    @property
    def has_overlaps(self) -> bool:
        return bool(self.overlaps)


@dataclass(frozen=True)
class PayrollSummary:
    total_gross: Decimal
    total_net: Decimal
    total_deductions: Decimal
    pending_count: int
    approved_count: int
    paid_count: int
