from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.money import dsum, to_money
from ..common.validators import (
    optional_text,
    parse_decimal,
    parse_enum,
    require_non_empty,
    require_non_negative,
    require_positive,
)
from ..core.enums import Permission, Role, TransactionCategory, TransactionType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from ..profiles.repository import ProfileRepository
from ..projects.repository import ProjectRepository
from .model import BankAccount, BankingStats, BankTransaction, TransactionFilter
from .repository import BankAccountRepository, BankTransactionRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountInput:
    bank_name: str
    account_number: str
    account_holder_name: str
    bsb_code: Optional[str] = None
    swift_code: Optional[str] = None
    opening_balance: Any = None
    is_primary: bool = False
    profile_id: Optional[int] = None


@dataclass(frozen=True)
class TransactionInput:
    description: str
    amount: Any
    type: str
    category: str
    txn_date: Optional[date]
    bank_account_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    profile_id: Optional[int] = None


class BankingService:
    """Use case: bank accounts, transactions and balances."""

    def __init__(
        self,
        accounts: BankAccountRepository,
        transactions: BankTransactionRepository,
        profiles: ProfileRepository,
        projects: ProjectRepository,
        permissions: PermissionService,
    ):
        self._accounts = accounts
        self._transactions = transactions
        self._profiles = profiles
        self._projects = projects
        self._permissions = permissions

    # accounts

    def _clean_account(self, data: AccountInput) -> dict:
        if data.profile_id is not None and not self._profiles.get_by_id(int(data.profile_id)):
            raise ValidationError("Team member not found")
        opening = require_non_negative(
            to_money(parse_decimal(data.opening_balance, "Opening balance", default=Decimal(0))),
            "Opening balance",
        )
        return {
            "bank_name": require_non_empty(data.bank_name, "Bank name"),
            "account_number": require_non_empty(data.account_number, "Account number"),
            "account_holder_name": require_non_empty(data.account_holder_name, "Account holder name"),
            "bsb_code": optional_text(data.bsb_code),
            "swift_code": optional_text(data.swift_code),
            "opening_balance": opening,
            "is_primary": 1 if data.is_primary else 0,
            "profile_id": int(data.profile_id) if data.profile_id is not None else None,
        }

    def get_account(self, account_id: int) -> BankAccount:
        account = self._accounts.get_by_id(int(account_id))
        if not account:
            raise NotFoundError("Bank account not found")
        return account

    def create_account(self, *, current_role: Role, data: AccountInput) -> int:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        values = self._clean_account(data)
        account_id = self._accounts.create(values=values)
        if values["is_primary"]:
            self._accounts.clear_primary(profile_id=values["profile_id"], except_account_id=account_id)
        logger.info("Created bank account %s", account_id)
        return account_id

    def update_account(self, *, current_role: Role, account_id: int, data: AccountInput) -> None:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        account = self.get_account(account_id)
        values = self._clean_account(data)
        self._accounts.update(account.account_id, changes=values)
        if values["is_primary"]:
            self._accounts.clear_primary(profile_id=values["profile_id"], except_account_id=account.account_id)

    def delete_account(self, *, current_role: Role, account_id: int) -> None:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        account = self.get_account(account_id)
        if self._transactions.count_for_account(account.account_id) > 0:
            raise ConflictError("This account has transactions and cannot be deleted")
        self._accounts.delete(account.account_id)
        logger.info("Deleted bank account %s", account.account_id)

    def list_accounts(self, *, profile_id: Optional[int] = None, company_only: bool = False) -> Sequence[BankAccount]:
        return self._accounts.list_accounts(profile_id=profile_id, company_only=company_only)

    def primary_company_account(self) -> Optional[BankAccount]:
        accounts = self._accounts.list_accounts(company_only=True)
        return accounts[0] if accounts else None

    # transactions

    def _clean_transaction(self, data: TransactionInput) -> dict:
        amount = require_positive(to_money(parse_decimal(data.amount, "Amount")), "Amount")
        if data.txn_date is None:
            raise ValidationError("Date is required")
        if data.bank_account_id is not None:
            self.get_account(data.bank_account_id)
        if data.project_id is not None:
            project = self._projects.get_by_id(int(data.project_id))
            if not project:
                raise ValidationError("Project not found")
            if data.client_id is not None and project.client_id != int(data.client_id):
                raise ValidationError("The selected project does not belong to the selected client")
        if data.profile_id is not None and not self._profiles.get_by_id(int(data.profile_id)):
            raise ValidationError("Team member not found")

        return {
            "description": require_non_empty(data.description, "Description"),
            "amount": amount,
            "type": parse_enum(TransactionType, data.type, "Transaction type").value,
            "category": parse_enum(TransactionCategory, data.category, "Category").value,
            "date": data.txn_date,
            "bank_account_id": data.bank_account_id,
            "client_id": data.client_id,
            "project_id": data.project_id,
            "profile_id": data.profile_id,
        }

    def get_transaction(self, transaction_id: int) -> BankTransaction:
        txn = self._transactions.get_by_id(int(transaction_id))
        if not txn:
            raise NotFoundError("Transaction not found")
        return txn

    def create_transaction(self, *, current_role: Role, data: TransactionInput) -> int:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        values = self._clean_transaction(data)
        transaction_id = self._transactions.create(values=values)
        logger.info("Recorded %s of %s (%s)", values["type"], values["amount"], values["category"])
        return transaction_id

    def update_transaction(self, *, current_role: Role, transaction_id: int, data: TransactionInput) -> None:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        txn = self.get_transaction(transaction_id)
        self._transactions.update(txn.transaction_id, changes=self._clean_transaction(data))

    def delete_transaction(self, *, current_role: Role, transaction_id: int) -> None:
        self._permissions.require(current_role, Permission.BANK_BALANCE_MANAGE)
        txn = self.get_transaction(transaction_id)
        self._transactions.delete(txn.transaction_id)

    def list_transactions(self, flt: TransactionFilter) -> Sequence[BankTransaction]:
        return self._transactions.list_transactions(flt)

    # balances

    def balance(self, account_id: Optional[int] = None) -> Decimal:
        """Opening balance plus deposits minus withdrawals, for one account or for all of them."""
        if account_id is not None:
            opening = self.get_account(account_id).opening_balance
        else:
            opening = dsum(a.opening_balance for a in self._accounts.list_accounts())
        totals = self._transactions.totals_by_type(account_id=account_id)
        return to_money(
            opening + Decimal(totals[TransactionType.DEPOSIT]) - Decimal(totals[TransactionType.WITHDRAWAL])
        )

    def stats(self) -> BankingStats:
        totals = self._transactions.totals_by_type()
        return BankingStats(
            total_balance=self.balance(),
            total_income=to_money(totals[TransactionType.DEPOSIT]),
            total_expense=to_money(totals[TransactionType.WITHDRAWAL]),
            account_count=len(self._accounts.list_accounts()),
        )
