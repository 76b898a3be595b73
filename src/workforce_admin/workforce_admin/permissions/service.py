from __future__ import annotations

import logging
from typing import FrozenSet, Mapping

from ..core.enums import Permission, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import RolePermissionRepository

logger = logging.getLogger(__name__)

P = Permission

DEFAULT_GRANTS: Mapping[Role, FrozenSet[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.ACCOUNTANT: frozenset(
        {
            P.DASHBOARD_VIEW,
            P.WORKING_HOURS_VIEW,
            P.WORKING_HOURS_APPROVE,
            P.PAYROLL_VIEW,
            P.PAYROLL_MANAGE,
            P.PAYROLL_PROCESS,
            P.BANK_BALANCE_VIEW,
            P.BANK_BALANCE_MANAGE,
            P.REPORTS_VIEW,
            P.REPORTS_GENERATE,
            P.NOTIFICATIONS_VIEW,
        }
    ),
    Role.OPERATION: frozenset(
        {
            P.DASHBOARD_VIEW,
            P.EMPLOYEES_VIEW,
            P.CLIENTS_VIEW,
            P.PROJECTS_VIEW,
            P.PROJECTS_MANAGE,
            P.WORKING_HOURS_VIEW,
            P.WORKING_HOURS_MANAGE,
            P.NOTIFICATIONS_VIEW,
            P.NOTIFICATIONS_CREATE,
        }
    ),
    Role.SALES_MANAGER: frozenset(
        {
            P.DASHBOARD_VIEW,
            P.CLIENTS_VIEW,
            P.CLIENTS_MANAGE,
            P.PROJECTS_VIEW,
            P.PROJECTS_MANAGE,
            P.REPORTS_VIEW,
            P.REPORTS_GENERATE,
            P.NOTIFICATIONS_VIEW,
        }
    ),
    Role.EMPLOYEE: frozenset({P.DASHBOARD_VIEW, P.WORKING_HOURS_VIEW, P.NOTIFICATIONS_VIEW}),
}


class PermissionService:
    """Role based access checks.

    Stored grants for a role replace its defaults as soon as the role has at least one row.
    Admin always keeps every permission.
    """

    def __init__(self, grants: RolePermissionRepository):
        self._grants = grants

    def permissions_for(self, role: Role) -> FrozenSet[Permission]:
        if role == Role.ADMIN:
            return DEFAULT_GRANTS[Role.ADMIN]
        if self._grants.has_rows_for_role(role):
            return frozenset(self._grants.list_for_role(role))
        return DEFAULT_GRANTS.get(role, frozenset())

    def has_permission(self, role: Role, permission: Permission) -> bool:
        return permission in self.permissions_for(role)

    def require(self, role: Role, permission: Permission) -> None:
        if not self.has_permission(role, permission):
            raise AuthorizationError("You do not have permission to perform this action")

    def matrix(self) -> dict[Role, FrozenSet[Permission]]:
        return {role: self.permissions_for(role) for role in Role}

    def _materialize_defaults(self, role: Role) -> None:
        if self._grants.has_rows_for_role(role):
            return
        for permission in DEFAULT_GRANTS.get(role, frozenset()):
            self._grants.add(role, permission)

    def grant(self, *, current_role: Role, role: Role, permission: Permission) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change role permissions")
        if role == Role.ADMIN:
            return
        self._materialize_defaults(role)
        self._grants.add(role, permission)
        logger.info("Granted %s to %s", permission.value, role.value)

    def revoke(self, *, current_role: Role, role: Role, permission: Permission) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change role permissions")
        if role == Role.ADMIN:
            raise ValidationError("Administrator permissions cannot be revoked")
        self._materialize_defaults(role)
        # An empty grant set would silently fall back to the defaults.
        if set(self._grants.list_for_role(role)) == {permission}:
            raise ValidationError("A role must keep at least one permission")
        self._grants.remove(role, permission)
        logger.info("Revoked %s from %s", permission.value, role.value)
