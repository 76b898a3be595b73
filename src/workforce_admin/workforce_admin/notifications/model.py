from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from ..core.enums import NotificationActionType, NotificationPriority


@dataclass(frozen=True)
class Notification:
    notification_id: int
    recipient_profile_id: int
    title: str
    message: str
    type: str
    priority: NotificationPriority = NotificationPriority.MEDIUM
    action_type: NotificationActionType = NotificationActionType.NONE
    action_data: Mapping[str, Any] = field(default_factory=dict)
    sender_profile_id: Optional[int] = None
    sender_name: Optional[str] = None
    related_id: Optional[int] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    is_actioned: bool = False
    actioned_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @property
    def needs_action(self) -> bool:
        return self.action_type != NotificationActionType.NONE and not self.is_actioned
