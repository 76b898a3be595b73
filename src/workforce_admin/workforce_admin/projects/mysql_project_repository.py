from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import ProjectStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_update, db_cursor, fetchall, fetchone
from .model import Project
from .repository import ProjectRepository

_SELECT = """
    SELECT p.id, p.name, p.description, p.client_id, p.status, p.start_date, p.end_date, p.budget,
           c.company AS client_name,
           (SELECT COUNT(*) FROM working_hours wh WHERE wh.project_id = p.id) AS timesheet_count
    FROM projects p
    JOIN clients c ON c.id = p.client_id
"""


def _row_to_project(r: dict) -> Project:
    return Project(
        project_id=int(r["id"]),
        name=r["name"],
        description=r.get("description"),
        client_id=int(r["client_id"]),
        status=ProjectStatus(r["status"]),
        start_date=r["start_date"],
        end_date=r.get("end_date"),
        budget=Decimal(r["budget"]) if r.get("budget") is not None else None,
        client_name=r.get("client_name"),
        timesheet_count=int(r.get("timesheet_count") or 0),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE p.id=%s", (int(project_id),))
            row = fetchone(cur)
            return _row_to_project(row) if row else None

    def create(self, *, values: Mapping[str, Any]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO projects(name, description, client_id, status, start_date, end_date, budget)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    values["name"],
                    values.get("description"),
                    int(values["client_id"]),
                    values["status"],
                    values["start_date"],
                    values.get("end_date"),
                    values.get("budget"),
                ),
            )
            return int(cur.lastrowid)

    def update(self, project_id: int, *, changes: Mapping[str, Any]) -> bool:
        sql, params = build_update("projects", "id", int(project_id), dict(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return cur.rowcount > 0

    def delete(self, project_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM projects WHERE id=%s", (int(project_id),))
            return cur.rowcount > 0

    def list_projects(
        self,
        *,
        client_id: Optional[int] = None,
        status: Optional[ProjectStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[Project]:
        clauses = ["1=1"]
        params: list[object] = []
        if client_id is not None:
            clauses.append("p.client_id=%s")
            params.append(int(client_id))
        if status is not None:
            clauses.append("p.status=%s")
            params.append(status.value)
        if search:
            clauses.append("(p.name LIKE %s OR p.description LIKE %s OR c.company LIKE %s)")
            params.extend([f"%{search}%"] * 3)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY p.start_date DESC, p.name", tuple(params))
            return [_row_to_project(r) for r in fetchall(cur)]
