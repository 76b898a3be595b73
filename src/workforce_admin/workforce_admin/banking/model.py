from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import TransactionCategory, TransactionType


@dataclass(frozen=True)
class BankAccount:
    """A company account (no profile) or a team member's payout account."""

    account_id: int
    bank_name: str
    account_number: str
    account_holder_name: str
    opening_balance: Decimal = Decimal("0.00")
    is_primary: bool = False
    bsb_code: Optional[str] = None
    swift_code: Optional[str] = None
    profile_id: Optional[int] = None
    profile_name: Optional[str] = None

    @property
    def is_company_account(self) -> bool:
        return self.profile_id is None


@dataclass(frozen=True)
class BankTransaction:
    transaction_id: int
    description: str
    amount: Decimal
    type: TransactionType
    category: TransactionCategory
    txn_date: date
    bank_account_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    profile_id: Optional[int] = None
    bank_name: Optional[str] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    profile_name: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type == TransactionType.DEPOSIT else -self.amount


@dataclass(frozen=True)
class TransactionFilter:
    account_id: Optional[int] = None
    type: Optional[TransactionType] = None
    category: Optional[TransactionCategory] = None
    start: Optional[date] = None
    end: Optional[date] = None
    search: Optional[str] = None
    limit: int = 500


@dataclass(frozen=True)
class BankingStats:
    total_balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    account_count: int
