from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import BulkPayroll, BulkPayrollItem


class BulkPayrollRepository(Protocol):
    def create_batch(self, *, values: Mapping[str, Any], profile_ids: Sequence[int]) -> int:
        """Insert the batch and one pending item per profile."""
        raise NotImplementedError

    def update_batch(self, bulk_payroll_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def update_item(self, item_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def get_batch(self, bulk_payroll_id: int) -> Optional[BulkPayroll]:
        raise NotImplementedError

    def list_batches(self) -> Sequence[BulkPayroll]:
        raise NotImplementedError

    def list_items(self, bulk_payroll_id: int) -> Sequence[BulkPayrollItem]:
        raise NotImplementedError
