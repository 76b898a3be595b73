from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class ProfileRepository(Protocol):
    """Repository interface for profiles.

    Note (DIP): services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def create(self, *, values: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, profile_id: int, *, changes: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def list_profiles(
        self,
        *,
        role: Optional[Role] = None,
        active_only: bool = False,
        search: Optional[str] = None,
    ) -> Sequence[Profile]:
        raise NotImplementedError
