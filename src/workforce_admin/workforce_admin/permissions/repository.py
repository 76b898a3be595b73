from __future__ import annotations

from typing import Protocol, Sequence

from ..core.enums import Permission, Role


class RolePermissionRepository(Protocol):
    def list_for_role(self, role: Role) -> Sequence[Permission]:
        raise NotImplementedError

    def has_rows_for_role(self, role: Role) -> bool:
        raise NotImplementedError

    def add(self, role: Role, permission: Permission) -> bool:
        raise NotImplementedError

    def remove(self, role: Role, permission: Permission) -> bool:
        raise NotImplementedError
