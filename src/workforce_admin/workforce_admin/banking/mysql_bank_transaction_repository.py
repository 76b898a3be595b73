from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import TransactionCategory, TransactionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import BankTransaction, TransactionFilter
from .repository import BankTransactionRepository

_SELECT = """
    SELECT t.id, t.description, t.amount, t.type, t.category, t.date,
           t.bank_account_id, t.client_id, t.project_id, t.profile_id,
           a.bank_name, c.company AS client_name, pr.name AS project_name, p.full_name AS profile_name
    FROM bank_transactions t
    LEFT JOIN bank_accounts a ON a.id = t.bank_account_id
    LEFT JOIN clients c ON c.id = t.client_id
    LEFT JOIN projects pr ON pr.id = t.project_id
    LEFT JOIN profiles p ON p.id = t.profile_id
"""


def _opt_int(value) -> Optional[int]:
    return int(value) if value is not None else None


def _row_to_transaction(r: dict) -> BankTransaction:
    return BankTransaction(
        transaction_id=int(r["id"]),
        description=r["description"],
        amount=Decimal(r["amount"]),
        type=TransactionType(r["type"]),
        category=TransactionCategory(r["category"]),
        txn_date=r["date"],
        bank_account_id=_opt_int(r.get("bank_account_id")),
        client_id=_opt_int(r.get("client_id")),
        project_id=_opt_int(r.get("project_id")),
        profile_id=_opt_int(r.get("profile_id")),
        bank_name=r.get("bank_name"),
        client_name=r.get("client_name"),
        project_name=r.get("project_name"),
        profile_name=r.get("profile_name"),
    )


class MySQLBankTransactionRepository(BankTransactionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, transaction_id: int) -> Optional[BankTransaction]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE t.id=%s", (int(transaction_id),))
            row = fetchone(cur)
            return _row_to_transaction(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO bank_transactions({columns}) VALUES({placeholders})", tuple(values.values()))
            return int(cur.lastrowid)

    def update(self, transaction_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("bank_transactions", "id", int(transaction_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, transaction_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM bank_transactions WHERE id=%s", (int(transaction_id),))
            return cur.rowcount > 0

    def list_transactions(self, flt: TransactionFilter) -> Sequence[BankTransaction]:
        clauses = ["1=1"]
        params: list[object] = []
        if flt.account_id is not None:
            clauses.append("t.bank_account_id=%s")
            params.append(int(flt.account_id))
        if flt.type is not None:
            clauses.append("t.type=%s")
            params.append(flt.type.value)
        if flt.category is not None:
            clauses.append("t.category=%s")
            params.append(flt.category.value)
        if flt.start is not None:
            clauses.append("t.date >= %s")
            params.append(flt.start)
        if flt.end is not None:
            clauses.append("t.date <= %s")
            params.append(flt.end)
        if flt.search:
            clauses.append("(t.description LIKE %s OR c.company LIKE %s OR pr.name LIKE %s OR p.full_name LIKE %s)")
            params.extend([f"%{flt.search}%"] * 4)

        params.append(int(flt.limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY t.date DESC, t.id DESC LIMIT %s",
                tuple(params),
            )
            return [_row_to_transaction(r) for r in fetchall(cur)]

    def totals_by_type(self, *, account_id: Optional[int] = None) -> Mapping[TransactionType, Any]:
        sql = "SELECT type, COALESCE(SUM(amount), 0) AS total FROM bank_transactions"
        params: tuple = ()
        if account_id is not None:
            sql += " WHERE bank_account_id=%s"
            params = (int(account_id),)
        sql += " GROUP BY type"

        totals = {t: Decimal("0.00") for t in TransactionType}
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            for r in fetchall(cur):
                totals[TransactionType(r["type"])] = Decimal(r["total"])
        return totals

    def count_for_account(self, account_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS c FROM bank_transactions WHERE bank_account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return int(row["c"]) if row else 0
