from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        raise NotImplementedError

    def create_many(self, *, rows: Sequence[Mapping[str, Any]]) -> int:
        """Insert one notification per row; returns the number inserted."""
        raise NotImplementedError

    def list_for_recipient(
        self,
        profile_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        unread_only: bool = False,
        limit: int = 200,
    ) -> Sequence[Notification]:
        raise NotImplementedError

    def unread_count(self, profile_id: int) -> int:
        raise NotImplementedError

    def mark_read(self, notification_id: int, *, at: datetime) -> bool:
        raise NotImplementedError

    def mark_all_read(self, profile_id: int, *, at: datetime) -> int:
        raise NotImplementedError

    def mark_actioned(self, notification_id: int, *, at: datetime) -> bool:
        """Set the actioned flag once; False when already actioned."""
        raise NotImplementedError

    def delete(self, notification_id: int) -> bool:
        raise NotImplementedError
