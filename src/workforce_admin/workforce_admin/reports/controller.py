from __future__ import annotations

import csv
import io
import logging
from datetime import timedelta

from flask import Flask, flash, redirect, render_template, url_for

from ..common.datetime_utils import now_local
from ..common.web import arg_date, arg_int, current_profile_id, current_role, login_required, permission_required
from ..core.constants import DEFAULT_PAY_PERIOD_DAYS
from ..core.enums import Permission, Role
from ..core.exceptions import DomainError
from ..container import Container
from .service import TIMESHEET_CSV_FIELDS, ReportData

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _range_from_args():
        today = now_local().date()
        start = arg_date("start") or today - timedelta(days=DEFAULT_PAY_PERIOD_DAYS - 1)
        end = arg_date("end") or today
        return start, end

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=TIMESHEET_CSV_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        role = current_role()
        today = now_local().date()
        stats = None
        if role != Role.EMPLOYEE and container.permission_service.has_permission(role, Permission.DASHBOARD_VIEW):
            stats = container.report_service.dashboard_stats()
        personal = container.report_service.personal_dashboard(current_profile_id(), today=today)
        return render_template(
            "dashboard.html",
            stats=stats,
            personal=personal,
            today=today,
            active_page="dashboard",
        )

    @app.route("/reports", endpoint="reports")
    @permission_required(Permission.REPORTS_VIEW)
    def reports():
        try:
            start, end = _range_from_args()
            data = container.report_service.timesheet_report(start=start, end=end, profile_id=arg_int("profile_id"))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))
        return render_template(
            "reports/index.html",
            data=data,
            start=start,
            end=end,
            profiles=container.profile_service.list_profiles(),
            active_page="reports",
        )

    @app.route("/reports/timesheets.csv", endpoint="export_timesheets")
    @permission_required(Permission.REPORTS_GENERATE)
    def export_timesheets():
        try:
            start, end = _range_from_args()
            data = container.report_service.timesheet_report(start=start, end=end, profile_id=arg_int("profile_id"))
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("reports"))
        return _write_report_csv(data=data, filename=f"timesheets_{start:%Y%m%d}_{end:%Y%m%d}.csv")

    @app.route("/me/timesheets.csv", endpoint="export_my_timesheets")
    @login_required
    def export_my_timesheets():
        try:
            start, end = _range_from_args()
            data = container.report_service.timesheet_report(start=start, end=end, profile_id=current_profile_id())
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("dashboard"))
        return _write_report_csv(data=data, filename=f"my_timesheets_{start:%Y%m%d}_{end:%Y%m%d}.csv")
