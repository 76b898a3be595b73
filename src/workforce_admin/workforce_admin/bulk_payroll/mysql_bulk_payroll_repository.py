from __future__ import annotations

from dataclasses import replace
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import BulkPayrollItemStatus, BulkPayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import BulkPayroll, BulkPayrollItem
from .repository import BulkPayrollRepository

_BATCH_COLUMNS = """
    id, name, description, pay_period_start, pay_period_end, status,
    total_records, processed_records, total_amount, created_by, created_at
"""


def _row_to_batch(r: dict) -> BulkPayroll:
    return BulkPayroll(
        bulk_payroll_id=int(r["id"]),
        name=r["name"],
        description=r.get("description"),
        pay_period_start=r["pay_period_start"],
        pay_period_end=r["pay_period_end"],
        status=BulkPayrollStatus(r["status"]),
        total_records=int(r.get("total_records") or 0),
        processed_records=int(r.get("processed_records") or 0),
        total_amount=Decimal(r.get("total_amount") or 0),
        created_by=int(r["created_by"]),
        created_at=r.get("created_at"),
    )


def _row_to_item(r: dict) -> BulkPayrollItem:
    return BulkPayrollItem(
        item_id=int(r["id"]),
        bulk_payroll_id=int(r["bulk_payroll_id"]),
        profile_id=int(r["profile_id"]),
        payroll_id=int(r["payroll_id"]) if r.get("payroll_id") is not None else None,
        status=BulkPayrollItemStatus(r["status"]),
        error_message=r.get("error_message"),
        profile_name=r.get("profile_name"),
    )


class MySQLBulkPayrollRepository(BulkPayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_batch(self, *, values: Mapping[str, Any], profile_ids: Sequence[int]) -> int:
        columns = ", ".join(values.keys())
        placeholders = ",".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO bulk_payroll({columns}) VALUES({placeholders})", tuple(values.values()))
            bulk_payroll_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT INTO bulk_payroll_items(bulk_payroll_id, profile_id, status) VALUES(%s,%s,%s)",
                [(bulk_payroll_id, int(pid), BulkPayrollItemStatus.PENDING.value) for pid in profile_ids],
            )
            return bulk_payroll_id

    def update_batch(self, bulk_payroll_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("bulk_payroll", "id", int(bulk_payroll_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def update_item(self, item_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("bulk_payroll_items", "id", int(item_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def get_batch(self, bulk_payroll_id: int) -> Optional[BulkPayroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BATCH_COLUMNS} FROM bulk_payroll WHERE id=%s", (int(bulk_payroll_id),))
            row = fetchone(cur)
        if not row:
            return None
        return replace(_row_to_batch(row), items=tuple(self.list_items(bulk_payroll_id)))

    def list_batches(self) -> Sequence[BulkPayroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BATCH_COLUMNS} FROM bulk_payroll ORDER BY created_at DESC, id DESC")
            return [_row_to_batch(r) for r in fetchall(cur)]

    def list_items(self, bulk_payroll_id: int) -> Sequence[BulkPayrollItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT i.id, i.bulk_payroll_id, i.profile_id, i.payroll_id, i.status, i.error_message,
                       p.full_name AS profile_name
                FROM bulk_payroll_items i
                JOIN profiles p ON p.id = i.profile_id
                WHERE i.bulk_payroll_id=%s
                ORDER BY i.id
                """,
                (int(bulk_payroll_id),),
            )
            return [_row_to_item(r) for r in fetchall(cur)]
