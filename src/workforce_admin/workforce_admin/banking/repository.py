from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import TransactionType
from .model import BankAccount, BankTransaction, TransactionFilter


class BankAccountRepository(Protocol):
    def get_by_id(self, account_id: int) -> Optional[BankAccount]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, account_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, account_id: int) -> bool:
        raise NotImplementedError

    def list_accounts(self, *, profile_id: Optional[int] = None, company_only: bool = False) -> Sequence[BankAccount]:
        """Accounts with the primary one first."""
        raise NotImplementedError

    def clear_primary(self, *, profile_id: Optional[int], except_account_id: Optional[int] = None) -> int:
        """Unset the primary flag on every account of the same owner (company when profile_id is None)."""
        raise NotImplementedError


class BankTransactionRepository(Protocol):
    def get_by_id(self, transaction_id: int) -> Optional[BankTransaction]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, transaction_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, transaction_id: int) -> bool:
        raise NotImplementedError

    def list_transactions(self, flt: TransactionFilter) -> Sequence[BankTransaction]:
        raise NotImplementedError

    def totals_by_type(self, *, account_id: Optional[int] = None) -> Mapping[TransactionType, Any]:
        raise NotImplementedError

    def count_for_account(self, account_id: int) -> int:
        raise NotImplementedError
