from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import Payroll


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any], working_hours_ids: Sequence[int] = ()) -> int:
        """Insert a payroll and link the given timesheet rows to it in one transaction."""
        raise NotImplementedError

    def update(self, payroll_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int) -> bool:
        """Delete a payroll; its timesheet links go with it."""
        raise NotImplementedError

    def list_payrolls(
        self,
        *,
        status: Optional[PayrollStatus] = None,
        profile_id: Optional[int] = None,
        search: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[Payroll]:
        raise NotImplementedError

    def find_overlapping(self, profile_ids: Sequence[int], start: date, end: date) -> Sequence[Payroll]:
        raise NotImplementedError

    def linked_working_hours_ids(self, payroll_id: int) -> Sequence[int]:
        raise NotImplementedError
