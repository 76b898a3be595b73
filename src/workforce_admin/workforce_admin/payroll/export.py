from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import Payroll

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

SHEET_COLUMNS = [
    "Payroll ID",
    "Team member",
    "Period start",
    "Period end",
    "Hours",
    "Hourly rate",
    "Gross pay",
    "Deductions",
    "Net pay",
    "Status",
]


def salary_sheet_rows(payrolls: Sequence[Payroll]) -> list[dict]:
    return [
        dict(
            zip(
                SHEET_COLUMNS,
                [
                    p.payroll_id,
                    p.profile_name or "",
                    p.pay_period_start.strftime("%Y-%m-%d"),
                    p.pay_period_end.strftime("%Y-%m-%d"),
                    float(p.total_hours),
                    float(p.hourly_rate),
                    float(p.gross_pay),
                    float(p.deductions),
                    float(p.net_pay),
                    p.status.value,
                ],
            )
        )
        for p in payrolls
    ]


def build_salary_sheet(payrolls: Sequence[Payroll]) -> io.BytesIO:
    """Salary sheet as an in-memory .xlsx file (nothing is written to disk)."""
    df = pd.DataFrame(salary_sheet_rows(payrolls), columns=SHEET_COLUMNS)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Payroll")
    output.seek(0)
    return output
