from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_hhmm, parse_optional_date
from ..common.web import (
    arg_date,
    arg_int,
    current_profile_id,
    current_role,
    form_ids,
    form_int,
    permission_required,
)
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Permission, WorkingHoursStatus
from ..core.exceptions import DomainError
from ..container import Container
from .model import HoursFilter
from .service import HoursInput

logger = logging.getLogger(__name__)


def _hours_input_from_form() -> HoursInput:
    f = request.form
    profile_id = form_int("profile_id") or current_profile_id()
    return HoursInput(
        profile_id=profile_id,
        client_id=form_int("client_id"),
        project_id=form_int("project_id"),
        work_date=parse_optional_date(f.get("date")),
        start_time=parse_hhmm(f.get("start_time")),
        end_time=parse_hhmm(f.get("end_time")),
        sign_in_time=parse_hhmm(f.get("sign_in_time")),
        sign_out_time=parse_hhmm(f.get("sign_out_time")),
        hourly_rate=f.get("hourly_rate") or None,
        notes=f.get("notes"),
    )


def _filter_from_args() -> HoursFilter:
    status_s = request.args.get("status") or None
    return HoursFilter(
        profile_id=arg_int("profile_id"),
        client_id=arg_int("client_id"),
        project_id=arg_int("project_id"),
        status=WorkingHoursStatus(status_s) if status_s in {s.value for s in WorkingHoursStatus} else None,
        start=arg_date("start"),
        end=arg_date("end"),
        search=(request.args.get("q") or "").strip() or None,
        limit=DEFAULT_LIST_LIMIT,
    )


def register(app: Flask, container: Container) -> None:
    def _render_form(entry):
        return render_template(
            "timesheets/form.html",
            entry=entry,
            profiles=container.profile_service.list_profiles(active_only=True),
            clients=container.client_service.list_clients(),
            projects=container.project_service.list_projects(),
            active_page="timesheets",
        )

    @app.route("/timesheets", endpoint="timesheets")
    @permission_required(Permission.WORKING_HOURS_VIEW)
    def timesheets():
        try:
            flt = _filter_from_args()
            rows = container.timesheet_service.list_hours(
                current_role=current_role(),
                current_profile_id=current_profile_id(),
                flt=flt,
            )
        except DomainError as e:
            flash(str(e), "danger")
            flt, rows = HoursFilter(), []

        can_approve = container.permission_service.has_permission(current_role(), Permission.WORKING_HOURS_APPROVE)
        return render_template(
            "timesheets/index.html",
            rows=rows,
            totals=container.timesheet_service.totals(rows),
            flt=flt,
            statuses=list(WorkingHoursStatus),
            can_approve=can_approve,
            active_page="timesheets",
        )

    @app.route("/timesheets/new", methods=["GET", "POST"], endpoint="new_timesheet")
    @permission_required(Permission.WORKING_HOURS_VIEW)
    def new_timesheet():
        if request.method == "POST":
            try:
                container.timesheet_service.log_hours(
                    current_role=current_role(),
                    current_profile_id=current_profile_id(),
                    data=_hours_input_from_form(),
                )
                flash("Working hours logged", "success")
                return redirect(url_for("timesheets"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Logging working hours failed")
                flash("System error while logging working hours", "danger")
        return _render_form(None)

    @app.route("/timesheets/<int:working_hours_id>/edit", methods=["GET", "POST"], endpoint="edit_timesheet")
    @permission_required(Permission.WORKING_HOURS_VIEW)
    def edit_timesheet(working_hours_id: int):
        try:
            entry = container.timesheet_service.get(working_hours_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("timesheets"))

        if request.method == "POST":
            try:
                container.timesheet_service.update_hours(
                    current_role=current_role(),
                    current_profile_id=current_profile_id(),
                    working_hours_id=working_hours_id,
                    data=_hours_input_from_form(),
                )
                flash("Working hours updated", "success")
                return redirect(url_for("timesheets"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating working hours %s failed", working_hours_id)
                flash("System error while updating working hours", "danger")
        return _render_form(entry)

    @app.route("/timesheets/<int:working_hours_id>/delete", methods=["POST"], endpoint="delete_timesheet")
    @permission_required(Permission.WORKING_HOURS_VIEW)
    def delete_timesheet(working_hours_id: int):
        try:
            container.timesheet_service.delete_hours(
                current_role=current_role(),
                current_profile_id=current_profile_id(),
                working_hours_id=working_hours_id,
            )
            flash("Working hours deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting working hours %s failed", working_hours_id)
            flash("System error while deleting working hours", "danger")
        return redirect(url_for("timesheets"))

    @app.route("/timesheets/<int:working_hours_id>/approve", methods=["POST"], endpoint="approve_timesheet")
    @permission_required(Permission.WORKING_HOURS_APPROVE)
    def approve_timesheet(working_hours_id: int):
        try:
            container.timesheet_service.approve(current_role=current_role(), working_hours_id=working_hours_id)
            flash("Working hours approved", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Approving working hours %s failed", working_hours_id)
            flash("System error while approving working hours", "danger")
        return redirect(request.referrer or url_for("timesheets"))

    @app.route("/timesheets/<int:working_hours_id>/reject", methods=["POST"], endpoint="reject_timesheet")
    @permission_required(Permission.WORKING_HOURS_APPROVE)
    def reject_timesheet(working_hours_id: int):
        try:
            container.timesheet_service.reject(current_role=current_role(), working_hours_id=working_hours_id)
            flash("Working hours rejected", "info")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Rejecting working hours %s failed", working_hours_id)
            flash("System error while rejecting working hours", "danger")
        return redirect(request.referrer or url_for("timesheets"))

    @app.route("/timesheets/bulk", methods=["POST"], endpoint="bulk_review_timesheets")
    @permission_required(Permission.WORKING_HOURS_APPROVE)
    def bulk_review_timesheets():
        ids = form_ids("ids")
        action = request.form.get("action")
        try:
            if action == "approve":
                result = container.timesheet_service.approve_many(current_role=current_role(), ids=ids)
            elif action == "reject":
                result = container.timesheet_service.reject_many(current_role=current_role(), ids=ids)
            else:
                return jsonify({"success": False, "message": "Unknown action"}), 400
            return jsonify(
                {
                    "success": True,
                    "message": f"{len(result.done)} updated, {len(result.skipped)} skipped",
                    "done": result.done,
                    "skipped": result.skipped,
                }
            ), 200
        except DomainError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Bulk review of working hours failed")
            return jsonify({"success": False, "message": "System error while reviewing working hours"}), 500
