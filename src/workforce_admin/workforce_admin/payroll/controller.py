from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, request, send_file, url_for

from ..common.datetime_utils import now_local, parse_optional_date
from ..common.web import arg_date, arg_int, current_profile_id, current_role, form_ids, form_int, permission_required
from ..core.constants import DEFAULT_PAY_PERIOD_DAYS
from ..core.enums import PayrollStatus, Permission
from ..core.exceptions import DomainError
from ..container import Container
from .export import XLSX_MIMETYPE, build_salary_sheet
from .service import PayrollChanges

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _list_kwargs() -> dict:
        status_s = request.args.get("status") or None
        return {
            "status": PayrollStatus(status_s) if status_s in {s.value for s in PayrollStatus} else None,
            "profile_id": arg_int("profile_id"),
            "search": (request.args.get("q") or "").strip() or None,
            "start": arg_date("start"),
            "end": arg_date("end"),
        }

    def _render_generate(*, preview=None, selected=(), start=None, end=None):
        today = now_local().date()
        return render_template(
            "payroll/generate.html",
            profiles=container.profile_service.list_profiles(active_only=True),
            accounts=container.banking_service.list_accounts(company_only=True),
            preview=preview,
            selected=set(selected),
            start=start or today - timedelta(days=DEFAULT_PAY_PERIOD_DAYS - 1),
            end=end or today,
            active_page="payroll",
        )

    @app.route("/payroll", endpoint="payroll")
    @permission_required(Permission.PAYROLL_VIEW)
    def payroll():
        try:
            kwargs = _list_kwargs()
        except DomainError as e:
            flash(str(e), "danger")
            kwargs = {}
        payrolls = container.payroll_service.list_payrolls(**kwargs)
        return render_template(
            "payroll/index.html",
            payrolls=payrolls,
            summary=container.payroll_service.summary(payrolls),
            statuses=list(PayrollStatus),
            filters=kwargs,
            active_page="payroll",
        )

    @app.route("/payroll/export.xlsx", endpoint="export_payroll")
    @permission_required(Permission.REPORTS_GENERATE)
    def export_payroll():
        try:
            kwargs = _list_kwargs()
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("payroll"))
        output = build_salary_sheet(container.payroll_service.list_payrolls(**kwargs))
        return send_file(
            output,
            download_name=f"salary_sheet_{now_local():%Y%m%d}.xlsx",
            as_attachment=True,
            mimetype=XLSX_MIMETYPE,
        )

    @app.route("/payroll/generate", methods=["GET", "POST"], endpoint="generate_payroll")
    @permission_required(Permission.PAYROLL_MANAGE)
    def generate_payroll():
        if request.method == "GET":
            return _render_generate()

        profile_ids = form_ids("profile_ids")
        preview = None
        try:
            start = parse_optional_date(request.form.get("start"))
            end = parse_optional_date(request.form.get("end"))
            if request.form.get("action") == "generate":
                created = container.payroll_service.generate(
                    current_role=current_role(),
                    profile_ids=profile_ids,
                    start=start,
                    end=end,
                    bank_account_id=form_int("bank_account_id"),
                    sender_profile_id=current_profile_id(),
                )
                flash(f"{len(created)} payroll record(s) created", "success")
                return redirect(url_for("payroll"))

            preview = container.payroll_service.preview(
                current_role=current_role(),
                profile_ids=profile_ids,
                start=start,
                end=end,
            )
            if preview.has_overlaps:
                flash("Some team members already have payroll for an overlapping period", "warning")
        except DomainError as e:
            flash(str(e), "danger")
            start = end = None
        except Exception:
            logger.exception("Generating payroll failed")
            flash("System error while generating payroll", "danger")
            start = end = None
        return _render_generate(preview=preview, selected=profile_ids, start=start, end=end)

    @app.route("/payroll/new", methods=["GET", "POST"], endpoint="new_payroll")
    @permission_required(Permission.PAYROLL_MANAGE)
    def new_payroll():
        if request.method == "POST":
            try:
                container.payroll_service.create_manual(
                    current_role=current_role(),
                    profile_id=form_int("profile_id") or 0,
                    start=parse_optional_date(request.form.get("start")),
                    end=parse_optional_date(request.form.get("end")),
                    deductions=request.form.get("deductions"),
                    bank_account_id=form_int("bank_account_id"),
                )
                flash("Payroll created", "success")
                return redirect(url_for("payroll"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating payroll failed")
                flash("System error while creating payroll", "danger")
        return render_template(
            "payroll/new.html",
            profiles=container.profile_service.list_profiles(active_only=True),
            accounts=container.banking_service.list_accounts(),
            active_page="payroll",
        )

    @app.route("/payroll/<int:payroll_id>", endpoint="payroll_detail")
    @permission_required(Permission.PAYROLL_VIEW)
    def payroll_detail(payroll_id: int):
        try:
            item = container.payroll_service.get(payroll_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("payroll"))
        return render_template(
            "payroll/detail.html",
            payroll=item,
            rows=container.payroll_service.linked_hours(payroll_id),
            accounts=container.banking_service.list_accounts(),
            active_page="payroll",
        )

    @app.route("/payroll/<int:payroll_id>/edit", methods=["POST"], endpoint="edit_payroll")
    @permission_required(Permission.PAYROLL_MANAGE)
    def edit_payroll(payroll_id: int):
        f = request.form
        try:
            container.payroll_service.update(
                current_role=current_role(),
                payroll_id=payroll_id,
                changes=PayrollChanges(
                    total_hours=f.get("total_hours") or None,
                    hourly_rate=f.get("hourly_rate") or None,
                    deductions=f.get("deductions") or None,
                    pay_period_start=parse_optional_date(f.get("pay_period_start")),
                    pay_period_end=parse_optional_date(f.get("pay_period_end")),
                    bank_account_id=form_int("bank_account_id"),
                ),
            )
            flash("Payroll updated", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Updating payroll %s failed", payroll_id)
            flash("System error while updating payroll", "danger")
        return redirect(url_for("payroll_detail", payroll_id=payroll_id))

    @app.route("/payroll/<int:payroll_id>/recalculate", methods=["POST"], endpoint="recalculate_payroll")
    @permission_required(Permission.PAYROLL_MANAGE)
    def recalculate_payroll(payroll_id: int):
        try:
            container.payroll_service.recalculate_from_linked(current_role=current_role(), payroll_id=payroll_id)
            flash("Payroll recalculated from its working hours", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(url_for("payroll_detail", payroll_id=payroll_id))

    @app.route("/payroll/<int:payroll_id>/approve", methods=["POST"], endpoint="approve_payroll")
    @permission_required(Permission.PAYROLL_PROCESS)
    def approve_payroll(payroll_id: int):
        try:
            container.payroll_service.approve(current_role=current_role(), payroll_id=payroll_id)
            flash("Payroll approved", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(request.referrer or url_for("payroll"))

    @app.route("/payroll/<int:payroll_id>/paid", methods=["POST"], endpoint="pay_payroll")
    @permission_required(Permission.PAYROLL_PROCESS)
    def pay_payroll(payroll_id: int):
        try:
            container.payroll_service.mark_paid(
                current_role=current_role(),
                payroll_id=payroll_id,
                bank_account_id=form_int("bank_account_id"),
            )
            flash("Payroll marked as paid", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Paying payroll %s failed", payroll_id)
            flash("System error while paying payroll", "danger")
        return redirect(request.referrer or url_for("payroll"))

    @app.route("/payroll/<int:payroll_id>/delete", methods=["POST"], endpoint="delete_payroll")
    @permission_required(Permission.PAYROLL_MANAGE)
    def delete_payroll(payroll_id: int):
        try:
            container.payroll_service.delete(current_role=current_role(), payroll_id=payroll_id)
            flash("Payroll deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        return redirect(url_for("payroll"))
