from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import SalaryTemplate
from .repository import SalaryTemplateRepository

_SELECT = """
    SELECT t.id, t.name, t.description, t.profile_id, t.client_id, t.project_id, t.bank_account_id,
           t.base_hourly_rate, t.overtime_multiplier, t.deduction_percentage, t.is_active, t.updated_at,
           p.full_name AS profile_name
    FROM salary_templates t
    LEFT JOIN profiles p ON p.id = t.profile_id
"""


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _row_to_template(r: dict) -> SalaryTemplate:
    return SalaryTemplate(
        template_id=int(r["id"]),
        name=r["name"],
        description=r.get("description"),
        profile_id=_opt_int(r.get("profile_id")),
        client_id=_opt_int(r.get("client_id")),
        project_id=_opt_int(r.get("project_id")),
        bank_account_id=_opt_int(r.get("bank_account_id")),
        base_hourly_rate=Decimal(r["base_hourly_rate"]) if r.get("base_hourly_rate") is not None else None,
        overtime_multiplier=Decimal(r["overtime_multiplier"]),
        deduction_percentage=Decimal(r["deduction_percentage"]),
        is_active=bool(r.get("is_active", True)),
        profile_name=r.get("profile_name"),
        updated_at=r.get("updated_at"),
    )


class MySQLSalaryTemplateRepository(SalaryTemplateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, template_id: int) -> Optional[SalaryTemplate]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.id=%s", (int(template_id),))
            row = fetchone(cur)
            return _row_to_template(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO salary_templates({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def update(self, template_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("salary_templates", "id", int(template_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, template_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salary_templates WHERE id=%s", (int(template_id),))
            return cur.rowcount > 0

    def list_templates(self, *, profile_id: Optional[int] = None, active_only: bool = False) -> Sequence[SalaryTemplate]:
        clauses = ["1=1"]
        params: list[object] = []
        if profile_id is not None:
            clauses.append("t.profile_id=%s")
            params.append(int(profile_id))
        if active_only:
            clauses.append("t.is_active=1")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY t.updated_at DESC, t.id DESC", tuple(params))
            return [_row_to_template(r) for r in fetchall(cur)]
