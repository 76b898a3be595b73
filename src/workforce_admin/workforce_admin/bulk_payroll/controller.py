from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.web import current_profile_id, current_role, form_ids, permission_required
from ..core.enums import Permission
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/bulk-payroll", methods=["GET", "POST"], endpoint="bulk_payroll")
    @permission_required(Permission.PAYROLL_VIEW)
    def bulk_payroll():
        if request.method == "POST":
            if not container.permission_service.has_permission(current_role(), Permission.PAYROLL_MANAGE):
                flash("You do not have permission to perform this action", "danger")
                return redirect(url_for("bulk_payroll"))
            try:
                batch = container.bulk_payroll_service.run(
                    current_role=current_role(),
                    name=request.form.get("name", ""),
                    description=request.form.get("description"),
                    profile_ids=form_ids("profile_ids"),
                    start=parse_optional_date(request.form.get("start")),
                    end=parse_optional_date(request.form.get("end")),
                    created_by=current_profile_id(),
                )
                level = "success" if batch.failed_records == 0 else "warning"
                flash(
                    f"Batch {batch.status.value}: {batch.processed_records} of {batch.total_records} processed",
                    level,
                )
                return redirect(url_for("bulk_payroll_detail", bulk_payroll_id=batch.bulk_payroll_id))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Bulk payroll run failed")
                flash("System error while running bulk payroll", "danger")

        return render_template(
            "bulk_payroll/index.html",
            batches=container.bulk_payroll_service.list_batches(),
            profiles=container.profile_service.list_profiles(active_only=True),
            active_page="bulk_payroll",
        )

    @app.route("/bulk-payroll/<int:bulk_payroll_id>", endpoint="bulk_payroll_detail")
    @permission_required(Permission.PAYROLL_VIEW)
    def bulk_payroll_detail(bulk_payroll_id: int):
        try:
            batch = container.bulk_payroll_service.get_batch(bulk_payroll_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("bulk_payroll"))
        return render_template("bulk_payroll/detail.html", batch=batch, active_page="bulk_payroll")
