from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, in_clause
from .model import Payroll
from .repository import PayrollRepository

_SELECT = """
    SELECT pr.id, pr.profile_id, pr.pay_period_start, pr.pay_period_end, pr.total_hours, pr.hourly_rate,
           pr.gross_pay, pr.deductions, pr.net_pay, pr.status, pr.bank_account_id, pr.created_at,
           p.full_name AS profile_name
    FROM payroll pr
    JOIN profiles p ON p.id = pr.profile_id
"""


def _row_to_payroll(r: dict) -> Payroll:
    return Payroll(
        payroll_id=int(r["id"]),
        profile_id=int(r["profile_id"]),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        total_hours=Decimal(r["total_hours"]),
        hourly_rate=Decimal(r["hourly_rate"]),
        gross_pay=Decimal(r["gross_pay"]),
        deductions=Decimal(r["deductions"]),
        net_pay=Decimal(r["net_pay"]),
        status=PayrollStatus(r["status"]),
        bank_account_id=int(r["bank_account_id"]) if r.get("bank_account_id") is not None else None,
        profile_name=r.get("profile_name"),
        created_at=r.get("created_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE pr.id=%s", (int(payroll_id),))
            row = fetchone(cur)
            return _row_to_payroll(row) if row else None

    def create(self, *, values: Mapping[str, Any], working_hours_ids: Sequence[int] = ()) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO payroll({columns}) VALUES({placeholders})", tuple(values.values()))
            payroll_id = int(cur.lastrowid)
            if working_hours_ids:
                cur.executemany(
                    "INSERT INTO payroll_working_hours(payroll_id, working_hours_id) VALUES(%s,%s)",
                    [(payroll_id, int(wid)) for wid in working_hours_ids],
                )
            return payroll_id

    def update(self, payroll_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("payroll", "id", int(payroll_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_working_hours WHERE payroll_id=%s", (int(payroll_id),))
            cur.execute("DELETE FROM payroll WHERE id=%s", (int(payroll_id),))
            return cur.rowcount > 0

    def list_payrolls(
        self,
        *,
        status: Optional[PayrollStatus] = None,
        profile_id: Optional[int] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Payroll]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("pr.status=%s")
            params.append(status.value)
        if profile_id is not None:
            clauses.append("pr.profile_id=%s")
            params.append(int(profile_id))
        if search:
            clauses.append("(p.full_name LIKE %s OR p.email LIKE %s)")
            params.extend([f"%{search}%"] * 2)
        if start is not None:
            clauses.append("pr.pay_period_end >= %s")
            params.append(start)
        if end is not None:
            clauses.append("pr.pay_period_start <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY pr.pay_period_start DESC, pr.id DESC",
                tuple(params),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def find_overlapping(self, profile_ids: Sequence[int], start: date, end: date) -> Sequence[Payroll]:
        ids_sql, ids_params = in_clause("pr.profile_id", [int(i) for i in profile_ids])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {ids_sql} AND pr.pay_period_start <= %s AND pr.pay_period_end >= %s"
                " ORDER BY p.full_name, pr.pay_period_start",
                tuple(ids_params) + (end, start),
            )
            return [_row_to_payroll(r) for r in fetchall(cur)]

    def linked_working_hours_ids(self, payroll_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT working_hours_id FROM payroll_working_hours WHERE payroll_id=%s ORDER BY working_hours_id",
                (int(payroll_id),),
            )
            return [int(r["working_hours_id"]) for r in fetchall(cur)]
