from datetime import date, time
from decimal import Decimal

from src.workforce_admin.workforce_admin.core.enums import WorkingHoursStatus
from src.workforce_admin.workforce_admin.payroll.calculator.average_calculator import AverageRatePayrollCalculator
from src.workforce_admin.workforce_admin.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.workforce_admin.workforce_admin.timesheets.model import WorkingHours


def _row(working_hours_id, *, total, rate, actual="0", overtime="0", signed=False):
    return WorkingHours(
        working_hours_id=working_hours_id,
        profile_id=1,
        client_id=1,
        project_id=1,
        work_date=date(2026, 3, working_hours_id),
        start_time=time(9, 0),
        end_time=time(17, 0),
        total_hours=Decimal(total),
        hourly_rate=Decimal(rate),
        payable_amount=Decimal(0),
        status=WorkingHoursStatus.APPROVED,
        sign_in_time=time(8, 0) if signed else None,
        sign_out_time=time(18, 0) if signed else None,
        actual_hours=Decimal(actual),
        overtime_hours=Decimal(overtime),
    )


ROWS = [
    _row(1, total="8", rate="30", actual="10", overtime="2", signed=True),
    _row(2, total="8", rate="0"),
]


def test_standard_calculator_pays_overtime_premium():
    out = StandardPayrollCalculator().calculate(ROWS, fallback_rate=Decimal("25"))

    assert out.total_hours == Decimal("18.00")
    assert out.regular_hours == Decimal("16.00")
    assert out.overtime_hours == Decimal("2.00")
    assert out.regular_pay == Decimal("440.00")
    assert out.overtime_pay == Decimal("90.00")
    assert out.gross_pay == Decimal("530.00")
    assert out.deductions == Decimal("53.00")
    assert out.net_pay == Decimal("477.00")
    assert out.hourly_rate == Decimal("27.50")
    assert out.working_hours_ids == (1, 2)


def test_standard_calculator_uses_template_settings():
    calc = StandardPayrollCalculator(overtime_multiplier=Decimal("2"), deduction_rate=Decimal("0"))

    out = calc.calculate(ROWS, fallback_rate=Decimal("25"))

    assert out.overtime_pay == Decimal("120.00")
    assert out.deductions == Decimal("0.00")
    assert out.net_pay == out.gross_pay == Decimal("560.00")


def test_average_calculator_has_no_premium():
    out = AverageRatePayrollCalculator().calculate(ROWS, fallback_rate=Decimal("25"))

    assert out.total_hours == Decimal("18.00")
    assert out.hourly_rate == Decimal("27.50")
    assert out.overtime_pay == Decimal("0.00")
    assert out.gross_pay == Decimal("495.00")
    assert out.net_pay == Decimal("495.00")


def test_empty_rows_give_zero_pay():
    out = StandardPayrollCalculator().calculate([], fallback_rate=Decimal("25"))

    assert out.total_hours == Decimal("0.00")
    assert out.gross_pay == Decimal("0.00")
    assert out.hourly_rate == Decimal("0.00")
