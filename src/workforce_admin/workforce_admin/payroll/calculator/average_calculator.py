from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...common.money import dsum, to_hours, to_money
from ...timesheets.model import WorkingHours
from .base import PayBreakdown, PayrollCalculator


class AverageRatePayrollCalculator(PayrollCalculator):
    """Quick rule: all hours at the average row rate, no overtime premium."""

    def __init__(self, *, deduction_rate: Decimal = Decimal(0)):
        self.deduction_rate = Decimal(deduction_rate)

    def calculate(self, rows: Sequence[WorkingHours], *, fallback_rate: Decimal) -> PayBreakdown:
        hours = to_hours(dsum(r.worked_hours for r in rows))
        rates = [r.hourly_rate if r.hourly_rate > 0 else Decimal(fallback_rate) for r in rows]
        rate = to_money(dsum(rates) / len(rates)) if rates else to_money(fallback_rate)

        gross = to_money(hours * rate)
        deductions = to_money(gross * self.deduction_rate)
        return PayBreakdown(
            total_hours=hours,
            regular_hours=hours,
            overtime_hours=Decimal("0.00"),
            hourly_rate=rate,
            regular_pay=gross,
            overtime_pay=Decimal("0.00"),
            gross_pay=gross,
            deductions=deductions,
            net_pay=gross - deductions,
            working_hours_ids=tuple(r.working_hours_id for r in rows),
        )
