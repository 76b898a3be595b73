from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import WorkingHoursStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone, in_clause, normalize_mysql_time
from .model import HoursFilter, WorkingHours
from .repository import WorkingHoursRepository

_SELECT = """
    SELECT wh.id, wh.profile_id, wh.client_id, wh.project_id, wh.date, wh.start_time, wh.end_time,
           wh.sign_in_time, wh.sign_out_time, wh.total_hours, wh.actual_hours, wh.overtime_hours,
           wh.hourly_rate, wh.payable_amount, wh.notes, wh.status,
           p.full_name AS profile_name, c.company AS client_name, pr.name AS project_name,
           pwh.payroll_id
    FROM working_hours wh
    JOIN profiles p ON p.id = wh.profile_id
    JOIN clients c ON c.id = wh.client_id
    JOIN projects pr ON pr.id = wh.project_id
    LEFT JOIN payroll_working_hours pwh ON pwh.working_hours_id = wh.id
"""


def _dec(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0.00")


def _row_to_hours(r: dict) -> WorkingHours:
    return WorkingHours(
        working_hours_id=int(r["id"]),
        profile_id=int(r["profile_id"]),
        client_id=int(r["client_id"]),
        project_id=int(r["project_id"]),
        work_date=r["date"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        sign_in_time=normalize_mysql_time(r.get("sign_in_time")),
        sign_out_time=normalize_mysql_time(r.get("sign_out_time")),
        total_hours=_dec(r.get("total_hours")),
        actual_hours=_dec(r.get("actual_hours")),
        overtime_hours=_dec(r.get("overtime_hours")),
        hourly_rate=_dec(r.get("hourly_rate")),
        payable_amount=_dec(r.get("payable_amount")),
        notes=r.get("notes"),
        status=WorkingHoursStatus(r["status"]),
        profile_name=r.get("profile_name"),
        client_name=r.get("client_name"),
        project_name=r.get("project_name"),
        payroll_id=int(r["payroll_id"]) if r.get("payroll_id") is not None else None,
    )


class MySQLWorkingHoursRepository(WorkingHoursRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, working_hours_id: int) -> Optional[WorkingHours]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE wh.id=%s", (int(working_hours_id),))
            row = fetchone(cur)
            return _row_to_hours(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO working_hours({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def update(self, working_hours_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("working_hours", "id", int(working_hours_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, working_hours_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM working_hours WHERE id=%s", (int(working_hours_id),))
            return cur.rowcount > 0

    def set_status(
        self,
        working_hours_ids: Sequence[int],
        status: WorkingHoursStatus,
        *,
        only_from: Optional[WorkingHoursStatus] = None,
    ) -> int:
        ids_sql, ids_params = in_clause("id", [int(i) for i in working_hours_ids])
        sql = f"UPDATE working_hours SET status=%s WHERE {ids_sql}"
        params: list[object] = [status.value, *ids_params]
        if only_from is not None:
            sql += " AND status=%s"
            params.append(only_from.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(cur.rowcount)

    def list_hours(self, flt: HoursFilter) -> Sequence[WorkingHours]:
        clauses = ["1=1"]
        params: list[object] = []
        if flt.profile_id is not None:
            clauses.append("wh.profile_id=%s")
            params.append(int(flt.profile_id))
        if flt.client_id is not None:
            clauses.append("wh.client_id=%s")
            params.append(int(flt.client_id))
        if flt.project_id is not None:
            clauses.append("wh.project_id=%s")
            params.append(int(flt.project_id))
        if flt.status is not None:
            clauses.append("wh.status=%s")
            params.append(flt.status.value)
        if flt.start is not None:
            clauses.append("wh.date >= %s")
            params.append(flt.start)
        if flt.end is not None:
            clauses.append("wh.date <= %s")
            params.append(flt.end)
        if flt.search:
            clauses.append("(p.full_name LIKE %s OR c.company LIKE %s OR pr.name LIKE %s)")
            params.extend([f"%{flt.search}%"] * 3)
        if flt.unlinked_only:
            clauses.append("pwh.id IS NULL")

        sql = _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY wh.date DESC, wh.start_time DESC LIMIT %s"
        params.append(int(flt.limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_hours(r) for r in fetchall(cur)]

    def list_by_ids(self, working_hours_ids: Sequence[int]) -> Sequence[WorkingHours]:
        ids_sql, ids_params = in_clause("wh.id", [int(i) for i in working_hours_ids])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {ids_sql} ORDER BY wh.date", tuple(ids_params))
            return [_row_to_hours(r) for r in fetchall(cur)]
