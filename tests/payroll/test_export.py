from datetime import date
from decimal import Decimal

import pandas as pd

from src.workforce_admin.workforce_admin.core.enums import PayrollStatus
from src.workforce_admin.workforce_admin.payroll.export import SHEET_COLUMNS, build_salary_sheet, salary_sheet_rows
from src.workforce_admin.workforce_admin.payroll.model import Payroll

PAYROLLS = [
    Payroll(
        payroll_id=7,
        profile_id=3,
        pay_period_start=date(2026, 3, 1),
        pay_period_end=date(2026, 3, 7),
        total_hours=Decimal("16.00"),
        hourly_rate=Decimal("30.00"),
        gross_pay=Decimal("480.00"),
        deductions=Decimal("48.00"),
        net_pay=Decimal("432.00"),
        status=PayrollStatus.APPROVED,
        profile_name="Sam Hill",
    )
]


def test_salary_sheet_rows():
    rows = salary_sheet_rows(PAYROLLS)

    assert list(rows[0]) == SHEET_COLUMNS
    assert rows[0]["Team member"] == "Sam Hill"
    assert rows[0]["Period start"] == "2026-03-01"
    assert rows[0]["Net pay"] == 432.0
    assert rows[0]["Status"] == "approved"


def test_build_salary_sheet_is_readable_xlsx():
    buf = build_salary_sheet(PAYROLLS)

    df = pd.read_excel(buf, sheet_name="Payroll")
    assert list(df.columns) == SHEET_COLUMNS
    assert df.loc[0, "Payroll ID"] == 7
    assert df.loc[0, "Gross pay"] == 480.0


def test_empty_sheet_keeps_header():
    df = pd.read_excel(build_salary_sheet([]), sheet_name="Payroll")

    assert list(df.columns) == SHEET_COLUMNS
    assert df.empty
