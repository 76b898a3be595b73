from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import BankAccount
from .repository import BankAccountRepository

_SELECT = """
    SELECT a.id, a.bank_name, a.account_number, a.account_holder_name, a.bsb_code, a.swift_code,
           a.opening_balance, a.is_primary, a.profile_id, p.full_name AS profile_name
    FROM bank_accounts a
    LEFT JOIN profiles p ON p.id = a.profile_id
"""


def _row_to_account(r: dict) -> BankAccount:
    return BankAccount(
        account_id=int(r["id"]),
        bank_name=r["bank_name"],
        account_number=r["account_number"],
        account_holder_name=r["account_holder_name"],
        bsb_code=r.get("bsb_code"),
        swift_code=r.get("swift_code"),
        opening_balance=Decimal(r.get("opening_balance") or 0),
        is_primary=bool(r.get("is_primary")),
        profile_id=int(r["profile_id"]) if r.get("profile_id") is not None else None,
        profile_name=r.get("profile_name"),
    )


class MySQLBankAccountRepository(BankAccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[BankAccount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE a.id=%s", (int(account_id),))
            row = fetchone(cur)
            return _row_to_account(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO bank_accounts({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def update(self, account_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("bank_accounts", "id", int(account_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, account_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM bank_accounts WHERE id=%s", (int(account_id),))
            return cur.rowcount > 0

    def list_accounts(self, *, profile_id: Optional[int] = None, company_only: bool = False) -> Sequence[BankAccount]:
        clauses = ["1=1"]
        params: list[object] = []
        if company_only:
            clauses.append("a.profile_id IS NULL")
        elif profile_id is not None:
            clauses.append("a.profile_id=%s")
            params.append(int(profile_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY a.is_primary DESC, a.bank_name, a.id",
                tuple(params),
            )
            return [_row_to_account(r) for r in fetchall(cur)]

    def clear_primary(self, *, profile_id: Optional[int], except_account_id: Optional[int] = None) -> int:
        if profile_id is None:
            sql, params = "UPDATE bank_accounts SET is_primary=0 WHERE profile_id IS NULL", []
        else:
            sql, params = "UPDATE bank_accounts SET is_primary=0 WHERE profile_id=%s", [int(profile_id)]
        if except_account_id is not None:
            sql += " AND id<>%s"
            params.append(int(except_account_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return int(cur.rowcount)
