from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EmploymentType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Profile
from .repository import ProfileRepository

_COLUMNS = """
    id, full_name, email, password_hash, role, employment_type, hourly_rate, salary,
    phone, full_address, tax_file_number, start_date, is_active, created_at
"""


def _row_to_profile(r: dict) -> Profile:
    return Profile(
        profile_id=int(r["id"]),
        full_name=r["full_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        hourly_rate=Decimal(r.get("hourly_rate") or 0),
        employment_type=EmploymentType(r["employment_type"]) if r.get("employment_type") else None,
        salary=r.get("salary"),
        phone=r.get("phone"),
        full_address=r.get("full_address"),
        tax_file_number=r.get("tax_file_number"),
        start_date=r.get("start_date"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE id=%s", (int(profile_id),))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM profiles WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_profile(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO profiles({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def update(self, profile_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("profiles", "id", int(profile_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def list_profiles(
        self,
        *,
        role: Optional[Role] = None,
        active_only: bool = False,
        search: Optional[str] = None,
    ) -> Sequence[Profile]:
        clauses = ["1=1"]
        params: list[object] = []
        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if active_only:
            clauses.append("is_active=1")
        if search:
            clauses.append("(full_name LIKE %s OR email LIKE %s)")
            params.extend([f"%{search}%", f"%{search}%"])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM profiles WHERE {' AND '.join(clauses)} ORDER BY full_name",
                tuple(params),
            )
            return [_row_to_profile(r) for r in fetchall(cur)]
