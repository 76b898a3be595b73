from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_profile_id, current_role, login_required, permission_required
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import EmploymentType, Permission, Role
from ..core.exceptions import AuthenticationError, DomainError
from ..container import Container
from .service import ProfileInput

logger = logging.getLogger(__name__)


def _profile_input_from_form() -> ProfileInput:
    f = request.form
    return ProfileInput(
        full_name=f.get("full_name", ""),
        email=f.get("email", ""),
        role=f.get("role", Role.EMPLOYEE.value),
        hourly_rate=f.get("hourly_rate", ""),
        employment_type=f.get("employment_type") or None,
        salary=f.get("salary") or None,
        phone=f.get("phone"),
        full_address=f.get("full_address"),
        tax_file_number=f.get("tax_file_number"),
        start_date=parse_optional_date(f.get("start_date")),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "profile_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(email, password)

                session.permanent = bool(remember)
                app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

                session["profile_id"] = s_user.profile_id
                session["name"] = s_user.full_name
                session["email"] = s_user.email
                session["role"] = s_user.role.value

                flash("Signed in successfully", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"System error while signing in: {e}", "danger")
                else:
                    flash("System error while signing in", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Signed out", "info")
        return redirect(url_for("login"))

    @app.route("/profiles", endpoint="profiles")
    @permission_required(Permission.EMPLOYEES_VIEW)
    def profiles():
        role_s = request.args.get("role") or None
        role = Role(role_s) if role_s in {r.value for r in Role} else None
        items = container.profile_service.list_profiles(
            role=role,
            active_only=request.args.get("active") == "1",
            search=request.args.get("q"),
        )
        return render_template(
            "profiles/index.html",
            profiles=items,
            stats=container.profile_service.stats(),
            roles=list(Role),
            active_page="profiles",
        )

    @app.route("/profiles/new", methods=["GET", "POST"], endpoint="new_profile")
    @permission_required(Permission.EMPLOYEES_MANAGE)
    def new_profile():
        if request.method == "POST":
            try:
                container.profile_service.create_profile(
                    current_role=current_role(),
                    data=_profile_input_from_form(),
                    password=request.form.get("password", ""),
                )
                flash("Team member added", "success")
                return redirect(url_for("profiles"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating profile failed")
                flash("System error while adding the team member", "danger")

        return render_template(
            "profiles/form.html",
            profile=None,
            roles=list(Role),
            employment_types=list(EmploymentType),
            active_page="profiles",
        )

    @app.route("/profiles/<int:profile_id>/edit", methods=["GET", "POST"], endpoint="edit_profile")
    @permission_required(Permission.EMPLOYEES_MANAGE)
    def edit_profile(profile_id: int):
        try:
            profile = container.profile_service.get(profile_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("profiles"))

        if request.method == "POST":
            try:
                container.profile_service.update_profile(
                    current_role=current_role(),
                    profile_id=profile_id,
                    data=_profile_input_from_form(),
                )
                flash("Team member updated", "success")
                return redirect(url_for("profiles"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating profile %s failed", profile_id)
                flash("System error while updating the team member", "danger")

        return render_template(
            "profiles/form.html",
            profile=profile,
            roles=list(Role),
            employment_types=list(EmploymentType),
            active_page="profiles",
        )

    @app.route("/profiles/<int:profile_id>/active", methods=["POST"], endpoint="set_profile_active")
    @permission_required(Permission.EMPLOYEES_MANAGE)
    def set_profile_active(profile_id: int):
        try:
            container.profile_service.set_active(
                current_role=current_role(),
                current_profile_id=current_profile_id(),
                profile_id=profile_id,
                is_active=request.form.get("is_active") == "1",
            )
            flash("Team member status updated", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Changing status of profile %s failed", profile_id)
            flash("System error while updating the team member", "danger")
        return redirect(url_for("profiles"))

    @app.route("/me/password", methods=["GET", "POST"], endpoint="change_password")
    @login_required
    def change_password():
        if request.method == "POST":
            try:
                container.profile_service.change_password(
                    profile_id=current_profile_id(),
                    current_password=request.form.get("current_password", ""),
                    new_password=request.form.get("new_password", ""),
                )
                flash("Password changed", "success")
                return redirect(url_for("dashboard"))
            except DomainError as e:
                flash(str(e), "danger")
        return render_template("profiles/password.html", active_page="change_password")
