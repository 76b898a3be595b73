from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import ClientStatus
from .model import Client


class ClientRepository(Protocol):
    def get_by_id(self, client_id: int) -> Optional[Client]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, client_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, client_id: int) -> bool:
        raise NotImplementedError

    def list_clients(
        self,
        *,
        status: Optional[ClientStatus] = None,
        search: Optional[str] = None,
    ) -> Sequence[Client]:
        raise NotImplementedError
