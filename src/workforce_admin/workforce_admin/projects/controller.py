from __future__ import annotations

import logging

from flask import Flask, flash, jsonify, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.web import arg_int, current_role, form_int, login_required, permission_required
from ..core.enums import Permission, ProjectStatus
from ..core.exceptions import DomainError
from ..container import Container
from .service import ProjectInput

logger = logging.getLogger(__name__)


def _project_input_from_form() -> ProjectInput:
    f = request.form
    return ProjectInput(
        name=f.get("name", ""),
        client_id=form_int("client_id"),
        start_date=parse_optional_date(f.get("start_date")),
        end_date=parse_optional_date(f.get("end_date")),
        description=f.get("description"),
        status=f.get("status") or ProjectStatus.ACTIVE.value,
        budget=f.get("budget"),
    )


def register(app: Flask, container: Container) -> None:
    def _render_form(project):
        return render_template(
            "projects/form.html",
            project=project,
            clients=container.client_service.list_clients(),
            statuses=list(ProjectStatus),
            active_page="projects",
        )

    @app.route("/projects", endpoint="projects")
    @permission_required(Permission.PROJECTS_VIEW)
    def projects():
        status_s = request.args.get("status") or None
        status = ProjectStatus(status_s) if status_s in {s.value for s in ProjectStatus} else None
        return render_template(
            "projects/index.html",
            projects=container.project_service.list_projects(
                client_id=arg_int("client_id"),
                status=status,
                search=request.args.get("q"),
            ),
            clients=container.client_service.list_clients(),
            stats=container.project_service.stats(),
            statuses=list(ProjectStatus),
            active_page="projects",
        )

    @app.route("/projects/new", methods=["GET", "POST"], endpoint="new_project")
    @permission_required(Permission.PROJECTS_MANAGE)
    def new_project():
        if request.method == "POST":
            try:
                container.project_service.create_project(current_role=current_role(), data=_project_input_from_form())
                flash("Project created", "success")
                return redirect(url_for("projects"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating project failed")
                flash("System error while creating the project", "danger")
        return _render_form(None)

    @app.route("/projects/<int:project_id>/edit", methods=["GET", "POST"], endpoint="edit_project")
    @permission_required(Permission.PROJECTS_MANAGE)
    def edit_project(project_id: int):
        try:
            project = container.project_service.get(project_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("projects"))

        if request.method == "POST":
            try:
                container.project_service.update_project(
                    current_role=current_role(),
                    project_id=project_id,
                    data=_project_input_from_form(),
                )
                flash("Project updated", "success")
                return redirect(url_for("projects"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating project %s failed", project_id)
                flash("System error while updating the project", "danger")
        return _render_form(project)

    @app.route("/projects/<int:project_id>/delete", methods=["POST"], endpoint="delete_project")
    @permission_required(Permission.PROJECTS_MANAGE)
    def delete_project(project_id: int):
        try:
            container.project_service.delete_project(current_role=current_role(), project_id=project_id)
            flash("Project deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting project %s failed", project_id)
            flash("System error while deleting the project", "danger")
        return redirect(url_for("projects"))

    @app.route("/api/clients/<int:client_id>/projects", endpoint="api_client_projects")
    @login_required
    def api_client_projects(client_id: int):
        """Projects of a client, used by the timesheet and transaction forms."""
        items = container.project_service.list_projects(client_id=client_id)
        return jsonify(
            {
                "success": True,
                "projects": [{"id": p.project_id, "name": p.name, "status": p.status.value} for p in items],
            }
        )
