from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import SalaryTemplate


class SalaryTemplateRepository(Protocol):
    def get_by_id(self, template_id: int) -> Optional[SalaryTemplate]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, template_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, template_id: int) -> bool:
        raise NotImplementedError

    def list_templates(self, *, profile_id: Optional[int] = None, active_only: bool = False) -> Sequence[SalaryTemplate]:
        """Templates ordered by most recently updated first."""
        raise NotImplementedError
