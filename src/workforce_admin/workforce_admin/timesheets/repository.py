from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import WorkingHoursStatus
from .model import HoursFilter, WorkingHours


class WorkingHoursRepository(Protocol):
    def get_by_id(self, working_hours_id: int) -> Optional[WorkingHours]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, working_hours_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, working_hours_id: int) -> bool:
        raise NotImplementedError

    def set_status(
        self,
        working_hours_ids: Sequence[int],
        status: WorkingHoursStatus,
        *,
        only_from: Optional[WorkingHoursStatus] = None,
    ) -> int:
        """Change status of the given rows; with `only_from`, rows in another status are left alone."""
        raise NotImplementedError

    def list_hours(self, flt: HoursFilter) -> Sequence[WorkingHours]:
        raise NotImplementedError

    def list_by_ids(self, working_hours_ids: Sequence[int]) -> Sequence[WorkingHours]:
        raise NotImplementedError
