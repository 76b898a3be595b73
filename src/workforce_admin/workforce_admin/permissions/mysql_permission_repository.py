from __future__ import annotations

from typing import Sequence

from ..core.enums import Permission, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .repository import RolePermissionRepository


class MySQLRolePermissionRepository(RolePermissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_role(self, role: Role) -> Sequence[Permission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT permission FROM role_permissions WHERE role=%s ORDER BY permission", (role.value,))
            out: list[Permission] = []
            for r in fetchall(cur):
                try:
                    out.append(Permission(r["permission"]))
                except ValueError:
                    # Rows for permissions that no longer exist are ignored.
                    continue
            return out

    def has_rows_for_role(self, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS x FROM role_permissions WHERE role=%s LIMIT 1", (role.value,))
            return fetchone(cur) is not None

    def add(self, role: Role, permission: Permission) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO role_permissions(role, permission) VALUES(%s,%s)",
                (role.value, permission.value),
            )
            return cur.rowcount > 0

    def remove(self, role: Role, permission: Permission) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM role_permissions WHERE role=%s AND permission=%s",
                (role.value, permission.value),
            )
            return cur.rowcount > 0
