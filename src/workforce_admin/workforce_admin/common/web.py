from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, flash, redirect, render_template, request, session, url_for

from ..core.enums import Permission, Role
from .datetime_utils import parse_optional_date


def current_role() -> Role:
    return Role(session.get("role"))


def current_profile_id() -> int:
    return int(session["profile_id"])


def render_forbidden() -> tuple[str, int]:
    current_user = {"full_name": session.get("name"), "role": session.get("role")}
    return render_template("403.html", current_user=current_user), 403


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "profile_id" not in session:
            flash("Please sign in to continue", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def permission_required(permission: Permission):
    """Allow the view only when the signed-in role holds `permission`."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "profile_id" not in session:
                return redirect(url_for("login"))
            permissions = current_app.extensions["container"].permission_service
            if not permissions.has_permission(current_role(), permission):
                return render_forbidden()
            return view(*args, **kwargs)

        return wrapper

    return decorator


def form_int(name: str) -> Optional[int]:
    value = (request.form.get(name) or "").strip()
    return int(value) if value.isdigit() else None


def arg_int(name: str) -> Optional[int]:
    value = (request.args.get(name) or "").strip()
    return int(value) if value.isdigit() else None


def form_ids(name: str) -> list[int]:
    return [int(v) for v in request.form.getlist(name) if str(v).strip().isdigit()]


def arg_date(name: str):
    return parse_optional_date(request.args.get(name))
