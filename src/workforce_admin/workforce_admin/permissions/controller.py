from __future__ import annotations

import logging

from flask import Flask, jsonify, render_template, request, session

from ..common.validators import parse_enum
from ..common.web import current_role, permission_required
from ..core.enums import Permission, Role
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.context_processor
    def inject_permissions():
        if "profile_id" not in session:
            return {"granted": frozenset()}
        granted = container.permission_service.permissions_for(current_role())
        return {"granted": frozenset(p.value for p in granted)}

    @app.route("/permissions", endpoint="permissions")
    @permission_required(Permission.EMPLOYEES_MANAGE)
    def permissions():
        return render_template(
            "permissions/index.html",
            matrix=container.permission_service.matrix(),
            roles=list(Role),
            all_permissions=list(Permission),
            active_page="permissions",
        )

    @app.route("/api/permissions", methods=["POST"], endpoint="api_toggle_permission")
    @permission_required(Permission.EMPLOYEES_MANAGE)
    def api_toggle_permission():
        data = request.get_json(silent=True) or {}
        try:
            role = parse_enum(Role, data.get("role"), "Role")
            permission = parse_enum(Permission, data.get("permission"), "Permission")
            if bool(data.get("granted")):
                container.permission_service.grant(current_role=current_role(), role=role, permission=permission)
            else:
                container.permission_service.revoke(current_role=current_role(), role=role, permission=permission)
            return jsonify({"success": True, "message": "Permissions updated"}), 200
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Updating role permissions failed")
            return jsonify({"success": False, "message": "System error while updating permissions"}), 500
