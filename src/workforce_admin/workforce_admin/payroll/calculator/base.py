from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from ...timesheets.model import WorkingHours


@dataclass(frozen=True)
class PayBreakdown:
    total_hours: Decimal
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    working_hours_ids: tuple[int, ...] = ()


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, rows: Sequence[WorkingHours], *, fallback_rate: Decimal) -> PayBreakdown:
        raise NotImplementedError
