from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.web import arg_date, arg_int, current_role, form_int, permission_required
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import Permission, TransactionCategory, TransactionType
from ..core.exceptions import DomainError
from ..container import Container
from .model import TransactionFilter
from .service import AccountInput, TransactionInput

logger = logging.getLogger(__name__)


def _account_input_from_form() -> AccountInput:
    f = request.form
    return AccountInput(
        bank_name=f.get("bank_name", ""),
        account_number=f.get("account_number", ""),
        account_holder_name=f.get("account_holder_name", ""),
        bsb_code=f.get("bsb_code"),
        swift_code=f.get("swift_code"),
        opening_balance=f.get("opening_balance"),
        is_primary=f.get("is_primary") == "1",
        profile_id=form_int("profile_id"),
    )


def _transaction_input_from_form() -> TransactionInput:
    f = request.form
    return TransactionInput(
        description=f.get("description", ""),
        amount=f.get("amount"),
        type=f.get("type", ""),
        category=f.get("category", ""),
        txn_date=parse_optional_date(f.get("date")),
        bank_account_id=form_int("bank_account_id"),
        client_id=form_int("client_id"),
        project_id=form_int("project_id"),
        profile_id=form_int("profile_id"),
    )


def _filter_from_args() -> TransactionFilter:
    type_s = request.args.get("type") or None
    category_s = request.args.get("category") or None
    return TransactionFilter(
        account_id=arg_int("account_id"),
        type=TransactionType(type_s) if type_s in {t.value for t in TransactionType} else None,
        category=TransactionCategory(category_s) if category_s in {c.value for c in TransactionCategory} else None,
        start=arg_date("start"),
        end=arg_date("end"),
        search=(request.args.get("q") or "").strip() or None,
        limit=DEFAULT_LIST_LIMIT,
    )


def register(app: Flask, container: Container) -> None:
    def _render_account_form(account):
        return render_template(
            "banking/account_form.html",
            account=account,
            profiles=container.profile_service.list_profiles(active_only=True),
            active_page="banking",
        )

    def _render_transaction_form(txn):
        return render_template(
            "banking/transaction_form.html",
            txn=txn,
            accounts=container.banking_service.list_accounts(),
            clients=container.client_service.list_clients(),
            projects=container.project_service.list_projects(),
            profiles=container.profile_service.list_profiles(active_only=True),
            types=list(TransactionType),
            categories=list(TransactionCategory),
            active_page="banking",
        )

    @app.route("/banking", endpoint="banking")
    @permission_required(Permission.BANK_BALANCE_VIEW)
    def banking():
        try:
            flt = _filter_from_args()
        except DomainError as e:
            flash(str(e), "danger")
            flt = TransactionFilter()
        accounts = container.banking_service.list_accounts()
        balances = {a.account_id: container.banking_service.balance(a.account_id) for a in accounts}
        return render_template(
            "banking/index.html",
            accounts=accounts,
            balances=balances,
            transactions=container.banking_service.list_transactions(flt),
            stats=container.banking_service.stats(),
            flt=flt,
            types=list(TransactionType),
            categories=list(TransactionCategory),
            active_page="banking",
        )

    @app.route("/banking/accounts/new", methods=["GET", "POST"], endpoint="new_bank_account")
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def new_bank_account():
        if request.method == "POST":
            try:
                container.banking_service.create_account(current_role=current_role(), data=_account_input_from_form())
                flash("Bank account added", "success")
                return redirect(url_for("banking"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating bank account failed")
                flash("System error while adding the bank account", "danger")
        return _render_account_form(None)

    @app.route("/banking/accounts/<int:account_id>/edit", methods=["GET", "POST"], endpoint="edit_bank_account")
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def edit_bank_account(account_id: int):
        try:
            account = container.banking_service.get_account(account_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("banking"))

        if request.method == "POST":
            try:
                container.banking_service.update_account(
                    current_role=current_role(),
                    account_id=account_id,
                    data=_account_input_from_form(),
                )
                flash("Bank account updated", "success")
                return redirect(url_for("banking"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating bank account %s failed", account_id)
                flash("System error while updating the bank account", "danger")
        return _render_account_form(account)

    @app.route("/banking/accounts/<int:account_id>/delete", methods=["POST"], endpoint="delete_bank_account")
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def delete_bank_account(account_id: int):
        try:
            container.banking_service.delete_account(current_role=current_role(), account_id=account_id)
            flash("Bank account deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting bank account %s failed", account_id)
            flash("System error while deleting the bank account", "danger")
        return redirect(url_for("banking"))

    @app.route("/banking/transactions/new", methods=["GET", "POST"], endpoint="new_transaction")
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def new_transaction():
        if request.method == "POST":
            try:
                container.banking_service.create_transaction(
                    current_role=current_role(),
                    data=_transaction_input_from_form(),
                )
                flash("Transaction recorded", "success")
                return redirect(url_for("banking"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Recording transaction failed")
                flash("System error while recording the transaction", "danger")
        return _render_transaction_form(None)

    @app.route(
        "/banking/transactions/<int:transaction_id>/edit",
        methods=["GET", "POST"],
        endpoint="edit_transaction",
    )
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def edit_transaction(transaction_id: int):
        try:
            txn = container.banking_service.get_transaction(transaction_id)
        except DomainError as e:
            flash(str(e), "danger")
            return redirect(url_for("banking"))

        if request.method == "POST":
            try:
                container.banking_service.update_transaction(
                    current_role=current_role(),
                    transaction_id=transaction_id,
                    data=_transaction_input_from_form(),
                )
                flash("Transaction updated", "success")
                return redirect(url_for("banking"))
            except DomainError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Updating transaction %s failed", transaction_id)
                flash("System error while updating the transaction", "danger")
        return _render_transaction_form(txn)

    @app.route(
        "/banking/transactions/<int:transaction_id>/delete",
        methods=["POST"],
        endpoint="delete_transaction",
    )
    @permission_required(Permission.BANK_BALANCE_MANAGE)
    def delete_transaction(transaction_id: int):
        try:
            container.banking_service.delete_transaction(current_role=current_role(), transaction_id=transaction_id)
            flash("Transaction deleted", "success")
        except DomainError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Deleting transaction %s failed", transaction_id)
            flash("System error while deleting the transaction", "danger")
        return redirect(url_for("banking"))
