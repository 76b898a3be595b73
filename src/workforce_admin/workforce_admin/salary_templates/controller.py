from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import current_role, form_int, permission_required
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..container import Container
from .service import TemplateInput

logger = logging.getLogger(__name__)


def _template_input_from_form() -> TemplateInput:
    f = request.form
    return TemplateInput(
        name=f.get("name", ""),
        description=f.get("description"),
        profile_id=form_int("profile_id"),
        client_id=form_int("client_id"),
        project_id=form_int("project_id"),
        bank_account_id=form_int("bank_account_id"),
        base_hourly_rate=f.get("base_hourly_rate"),
        overtime_multiplier=f.get("overtime_multiplier"),
        deduction_percentage=f.get("deduction_percentage"),
        is_active=f.get("is_active", "1") == "1",
    )


def register(app: Flask, container: Container) -> None:
    def _render_form(template):
        return render_template(
            "salary_templates/form.html",
            template=template,
            profiles=container.profile_service.list_profiles(active_only=True),
            clients=container.client_service.list_clients(),
            projects=container.project_service.list_projects(),
            accounts=container.banking_service.list_accounts(),
            active_page="salary_templates",
        )

    @app.route("/salary-templates", endpoint="salary_templates")
    @permission_required(Permission.PAYROLL_VIEW)
    def salary_templates():
        return render_template(
            "salary_templates/index.html",
            templates=container.salary_template_service.list_templates(),
            active_page="salary_templates",
        )

    @app.route("/salary-templates/new", methods=["GET", "POST"], endpoint="new_salary_template")
    @permission_required(Permission.PAYROLL_MANAGE)
    def new_salary_template():
        if request.method == "POST":
            try:
                container.salary_template_service.create_template(
                    current_role=current_role(),
                    data=_template_input_from_form(),
                )
                flash("Salary template saved", "success")
                return redirect(url_for("salary_templates"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating salary template failed")
                flash("System error while saving the salary template", "danger")
        return _render_form(None)

    @app.route(
        "/salary-templates/<int:template_id>/edit",
        methods=["GET", "POST"],
        endpoint="edit_salary_template",
    )
    @permission_required(Permission.PAYROLL_MANAGE)
    def edit_salary_template(template_id: int):
        try:
            template = container.salary_template_service.get(template_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("salary_templates"))

        if request.method == "POST":
            try:
                container.salary_template_service.update_template(
                    current_role=current_role(),
                    template_id=template_id,
                    data=_template_input_from_form(),
                )
                flash("Salary template updated", "success")
                return redirect(url_for("salary_templates"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating salary template %s failed", template_id)
                flash("System error while updating the salary template", "danger")
        return _render_form(template)

    @app.route("/salary-templates/<int:template_id>/delete", methods=["POST"], endpoint="delete_salary_template")
    @permission_required(Permission.PAYROLL_MANAGE)
    def delete_salary_template(template_id: int):
        try:
            container.salary_template_service.delete_template(current_role=current_role(), template_id=template_id)
            flash("Salary template deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(url_for("salary_templates"))
