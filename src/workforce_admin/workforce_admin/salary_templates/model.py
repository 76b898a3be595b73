from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SalaryTemplate:
    """Saved payroll settings for a team member."""

    template_id: int
    name: str
    overtime_multiplier: Decimal = Decimal("1.5")
    deduction_percentage: Decimal = Decimal("10")
    base_hourly_rate: Optional[Decimal] = None
    description: Optional[str] = None
    profile_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    bank_account_id: Optional[int] = None
    is_active: bool = True
    profile_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    @property
    def deduction_rate(self) -> Decimal:
        return self.deduction_percentage / Decimal(100)
