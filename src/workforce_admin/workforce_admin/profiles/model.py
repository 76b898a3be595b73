from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import EmploymentType, Role


@dataclass(frozen=True)
class Profile:
    """A team member who can sign in, log hours and be paid.

    Note: Plain data object; no DB access here.
    """

    profile_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    hourly_rate: Decimal = Decimal("0.00")
    employment_type: Optional[EmploymentType] = None
    salary: Optional[Decimal] = None
    phone: Optional[str] = None
    full_address: Optional[str] = None
    tax_file_number: Optional[str] = None
    start_date: Optional[date] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
