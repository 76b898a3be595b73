from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..core.enums import WorkingHoursStatus


@dataclass(frozen=True)
class WorkingHours:
    """One timesheet row: a profile's hours on a client project for one day."""

    working_hours_id: int
    profile_id: int
    client_id: int
    project_id: int
    work_date: date
    start_time: time
    end_time: time
    total_hours: Decimal
    hourly_rate: Decimal
    payable_amount: Decimal
    status: WorkingHoursStatus = WorkingHoursStatus.PENDING
    sign_in_time: Optional[time] = None
    sign_out_time: Optional[time] = None
    actual_hours: Decimal = Decimal("0.00")
    overtime_hours: Decimal = Decimal("0.00")
    notes: Optional[str] = None
    profile_name: Optional[str] = None
    client_name: Optional[str] = None
    project_name: Optional[str] = None
    payroll_id: Optional[int] = None

    @property
    def is_signed(self) -> bool:
        return self.sign_in_time is not None and self.sign_out_time is not None

    @property
    def worked_hours(self) -> Decimal:
        """Hours that are paid: actual when signed in/out, else scheduled."""
        return self.actual_hours if self.is_signed else self.total_hours


@dataclass(frozen=True)
class HoursFilter:
    profile_id: Optional[int] = None
    client_id: Optional[int] = None
    project_id: Optional[int] = None
    status: Optional[WorkingHoursStatus] = None
    start: Optional[date] = None
    end: Optional[date] = None
    search: Optional[str] = None
    unlinked_only: bool = False
    limit: int = 500
