from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from ...common.money import to_hours, to_money
from ...core.constants import DEFAULT_DEDUCTION_RATE, DEFAULT_OVERTIME_MULTIPLIER
from ...timesheets.model import WorkingHours
from .base import PayBreakdown, PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: regular hours at the row rate, overtime at rate * multiplier, flat deduction rate.

    A row without its own rate is paid at `fallback_rate`.
    """

    def __init__(
        self,
        *,
        overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER,
        deduction_rate: Decimal = DEFAULT_DEDUCTION_RATE,
    ):
        self.overtime_multiplier = Decimal(overtime_multiplier)
        self.deduction_rate = Decimal(deduction_rate)

    def calculate(self, rows: Sequence[WorkingHours], *, fallback_rate: Decimal) -> PayBreakdown:
        total_hours = Decimal(0)
        regular_hours = Decimal(0)
        overtime_hours = Decimal(0)
        regular_pay = Decimal(0)
        overtime_pay = Decimal(0)

        for row in rows:
            rate = row.hourly_rate if row.hourly_rate > 0 else Decimal(fallback_rate)
            worked = row.worked_hours
            overtime = min(row.overtime_hours, worked)
            regular = worked - overtime

            total_hours += worked
            regular_hours += regular
            overtime_hours += overtime
            regular_pay += regular * rate
            overtime_pay += overtime * rate * self.overtime_multiplier

        gross = to_money(regular_pay + overtime_pay)
        deductions = to_money(gross * self.deduction_rate)
        hourly_rate = to_money(regular_pay / regular_hours) if regular_hours > 0 else Decimal("0.00")

        return PayBreakdown(
            total_hours=to_hours(total_hours),
            regular_hours=to_hours(regular_hours),
            overtime_hours=to_hours(overtime_hours),
            hourly_rate=hourly_rate,
            regular_pay=to_money(regular_pay),
            overtime_pay=to_money(overtime_pay),
            gross_pay=gross,
            deductions=deductions,
            net_pay=gross - deductions,
            working_hours_ids=tuple(r.working_hours_id for r in rows),
        )
