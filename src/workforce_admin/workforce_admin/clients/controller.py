from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.web import current_role, permission_required
from ..core.enums import ClientStatus, Permission
from ..core.exceptions import DomainError
from ..container import Container
from .service import ClientInput

logger = logging.getLogger(__name__)


def _client_input_from_form() -> ClientInput:
    f = request.form
    return ClientInput(
        name=f.get("name", ""),
        email=f.get("email", ""),
        company=f.get("company", ""),
        phone=f.get("phone"),
        status=f.get("status") or ClientStatus.ACTIVE.value,
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/clients", endpoint="clients")
    @permission_required(Permission.CLIENTS_VIEW)
    def clients():
        status_s = request.args.get("status") or None
        status = ClientStatus(status_s) if status_s in {s.value for s in ClientStatus} else None
        return render_template(
            "clients/index.html",
            clients=container.client_service.list_clients(status=status, search=request.args.get("q")),
            stats=container.client_service.stats(),
            statuses=list(ClientStatus),
            active_page="clients",
        )

    @app.route("/clients/new", methods=["GET", "POST"], endpoint="new_client")
    @permission_required(Permission.CLIENTS_MANAGE)
    def new_client():
        if request.method == "POST":
            try:
                container.client_service.create_client(current_role=current_role(), data=_client_input_from_form())
                flash("Client created", "success")
                return redirect(url_for("clients"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating client failed")
                flash("System error while creating the client", "danger")
        return render_template("clients/form.html", client=None, statuses=list(ClientStatus), active_page="clients")

    @app.route("/clients/<int:client_id>/edit", methods=["GET", "POST"], endpoint="edit_client")
    @permission_required(Permission.CLIENTS_MANAGE)
    def edit_client(client_id: int):
        try:
            client = container.client_service.get(client_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("clients"))

        if request.method == "POST":
            try:
                container.client_service.update_client(
                    current_role=current_role(),
                    client_id=client_id,
                    data=_client_input_from_form(),
                )
                flash("Client updated", "success")
                return redirect(url_for("clients"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating client %s failed", client_id)
                flash("System error while updating the client", "danger")
        return render_template("clients/form.html", client=client, statuses=list(ClientStatus), active_page="clients")

    @app.route("/clients/<int:client_id>/delete", methods=["POST"], endpoint="delete_client")
    @permission_required(Permission.CLIENTS_MANAGE)
    def delete_client(client_id: int):
        try:
            container.client_service.delete_client(current_role=current_role(), client_id=client_id)
            flash("Client deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting client %s failed", client_id)
            flash("System error while deleting the client", "danger")
        return redirect(url_for("clients"))
