from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import parse_enum, require_non_empty
from ..core.enums import NotificationActionType, NotificationPriority, Permission, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..permissions.service import PermissionService
from ..profiles.repository import ProfileRepository
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "general"


@dataclass(frozen=True)
class NotificationInput:
    recipient_ids: Sequence[int]
    title: str
    message: str
    type: str = DEFAULT_TYPE
    priority: str = NotificationPriority.MEDIUM.value
    action_type: str = NotificationActionType.NONE.value
    action_data: Mapping[str, Any] = field(default_factory=dict)
    related_id: Optional[int] = None


class NotificationService:
    """Use case: send notifications and manage a profile's inbox."""

    def __init__(
        self,
        notifications: NotificationRepository,
        profiles: ProfileRepository,
        permissions: PermissionService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._notifications = notifications
        self._profiles = profiles
        self._permissions = permissions
        self._clock = clock

    def _rows(self, *, sender_profile_id: Optional[int], data: NotificationInput) -> list[dict]:
        recipients = list(dict.fromkeys(int(r) for r in data.recipient_ids))
        if not recipients:
            raise ValidationError("Select at least one recipient")
        title = require_non_empty(data.title, "Title")
        message = require_non_empty(data.message, "Message")
        priority = parse_enum(NotificationPriority, data.priority, "Priority")
        action_type = parse_enum(NotificationActionType, data.action_type, "Action type")
        return [
            {
                "title": title,
                "message": message,
                "type": (data.type or DEFAULT_TYPE).strip(),
                "recipient_profile_id": recipient_id,
                "sender_profile_id": sender_profile_id,
                "related_id": data.related_id,
                "priority": priority.value,
                "action_type": action_type.value,
                "action_data": dict(data.action_data or {}),
            }
            for recipient_id in recipients
        ]

    def send(self, *, current_role: Role, sender_profile_id: int, data: NotificationInput) -> int:
        rows = self._rows(sender_profile_id=sender_profile_id, data=data)
        required = Permission.NOTIFICATIONS_CREATE_BULK if len(rows) > 1 else Permission.NOTIFICATIONS_CREATE
        self._permissions.require(current_role, required)
        for r in rows:
            if not self._profiles.get_by_id(r["recipient_profile_id"]):
                raise ValidationError(f"Recipient {r['recipient_profile_id']} not found")

        count = self._notifications.create_many(rows=rows)
        logger.info("Profile %s sent %d notification(s) of type %s", sender_profile_id, count, rows[0]["type"])
        return count

    def notify(self, data: NotificationInput, *, sender_profile_id: Optional[int] = None) -> int:
        """System notification; no permission check."""
        return self._notifications.create_many(rows=self._rows(sender_profile_id=sender_profile_id, data=data))

    def inbox(
        self,
        profile_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        unread_only: bool = False,
    ) -> Sequence[Notification]:
        return self._notifications.list_for_recipient(int(profile_id), start=start, end=end, unread_only=unread_only)

    def unread_count(self, profile_id: int) -> int:
        return self._notifications.unread_count(int(profile_id))

    def _own(self, notification_id: int, profile_id: int) -> Notification:
        n = self._notifications.get_by_id(int(notification_id))
        if not n:
            raise NotFoundError("Notification not found")
        if n.recipient_profile_id != int(profile_id):
            raise AuthorizationError("This notification belongs to someone else")
        return n

    def mark_read(self, *, notification_id: int, profile_id: int) -> None:
        n = self._own(notification_id, profile_id)
        if not n.is_read:
            self._notifications.mark_read(n.notification_id, at=self._clock())

    def mark_all_read(self, *, profile_id: int) -> int:
        return self._notifications.mark_all_read(int(profile_id), at=self._clock())

    def take_action(self, *, notification_id: int, profile_id: int) -> Notification:
        n = self._own(notification_id, profile_id)
        if n.action_type == NotificationActionType.NONE:
            raise ValidationError("This notification has no action")
        if n.is_actioned or not self._notifications.mark_actioned(n.notification_id, at=self._clock()):
            raise ValidationError("This notification has already been actioned")
        logger.info("Profile %s took action %s on notification %s", profile_id, n.action_type.value, n.notification_id)
        return n

    def delete(self, *, notification_id: int, profile_id: int) -> None:
        n = self._own(notification_id, profile_id)
        self._notifications.delete(n.notification_id)
