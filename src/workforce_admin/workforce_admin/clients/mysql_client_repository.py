from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import ClientStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Client
from .repository import ClientRepository

_SELECT = """
    SELECT c.id, c.name, c.email, c.company, c.phone, c.status, c.created_at,
           (SELECT COUNT(*) FROM projects p WHERE p.client_id = c.id) AS project_count
    FROM clients c
"""


def _row_to_client(r: dict) -> Client:
    return Client(
        client_id=int(r["id"]),
        name=r["name"],
        email=r["email"],
        company=r["company"],
        phone=r.get("phone"),
        status=ClientStatus(r["status"]),
        project_count=int(r.get("project_count") or 0),
        created_at=r.get("created_at"),
    )


class MySQLClientRepository(ClientRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, client_id: int) -> Optional[Client]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE c.id=%s", (int(client_id),))
            row = fetchone(cur)
            return _row_to_client(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO clients(name, email, company, phone, status) VALUES(%s,%s,%s,%s,%s)",
                (values["name"], values["email"], values["company"], values.get("phone"), values["status"]),
            )
            return int(cur.lastrowid)

    def update(self, client_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("clients", "id", int(client_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, client_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM clients WHERE id=%s", (int(client_id),))
            return cur.rowcount > 0

    def list_clients(
        self,
        *,
        status: Optional[ClientStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[Client]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("c.status=%s")
            params.append(status.value)
        if search:
            clauses.append("(c.name LIKE %s OR c.company LIKE %s OR c.email LIKE %s)")
            params.extend([f"%{search}%"] * 3)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY c.company, c.name", tuple(params))
            return [_row_to_client(r) for r in fetchall(cur)]
