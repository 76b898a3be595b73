from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import NotificationActionType, NotificationPriority
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_SELECT = """
    SELECT n.id, n.title, n.message, n.type, n.recipient_profile_id, n.sender_profile_id, n.related_id,
           n.priority, n.action_type, n.action_data, n.is_read, n.read_at, n.is_actioned, n.actioned_at,
           n.created_at, s.full_name AS sender_name
    FROM notifications n
    LEFT JOIN profiles s ON s.id = n.sender_profile_id
"""

_INSERT_COLUMNS = (
    "title",
    "message",
    "type",
    "recipient_profile_id",
    "sender_profile_id",
    "related_id",
    "priority",
    "action_type",
    "action_data",
)


def _load_action_data(value) -> dict:
    if not value:
        return {}
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


def _row_to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["id"]),
        recipient_profile_id=int(r["recipient_profile_id"]),
        title=r["title"],
        message=r["message"],
        type=r["type"],
        priority=NotificationPriority(r["priority"]),
        action_type=NotificationActionType(r["action_type"]),
        action_data=_load_action_data(r.get("action_data")),
        sender_profile_id=int(r["sender_profile_id"]) if r.get("sender_profile_id") is not None else None,
        sender_name=r.get("sender_name"),
        related_id=int(r["related_id"]) if r.get("related_id") is not None else None,
        is_read=bool(r.get("is_read")),
        read_at=r.get("read_at"),
        is_actioned=bool(r.get("is_actioned")),
        actioned_at=r.get("actioned_at"),
        created_at=r.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE n.id=%s", (int(notification_id),))
            row = fetchone(cur)
            return _row_to_notification(row) if row else None

    def create_many(self, *, rows: Sequence[Mapping[str, Any]]) -> int:
        if not rows:
            return 0
        placeholders = ",".join(["%s"] * len(_INSERT_COLUMNS))
        params = []
        for r in rows:
            values = dict(r)
            values["action_data"] = json.dumps(values.get("action_data") or {})
            params.append(tuple(values.get(col) for col in _INSERT_COLUMNS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO notifications({', '.join(_INSERT_COLUMNS)}) VALUES({placeholders})",
                params,
            )
            return len(params)

    def list_for_recipient(
        self,
        profile_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        unread_only: bool = False,
        limit: int = 200,
    ) -> Sequence[Notification]:
        clauses = ["n.recipient_profile_id=%s"]
        params: list[object] = [int(profile_id)]
        if start is not None:
            clauses.append("n.created_at >= %s")
            params.append(datetime.combine(start, datetime.min.time()))
        if end is not None:
            clauses.append("n.created_at < %s")
            params.append(datetime.combine(end + timedelta(days=1), datetime.min.time()))
        if unread_only:
            clauses.append("n.is_read=0")
        params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY n.created_at DESC, n.id DESC LIMIT %s",
                tuple(params),
            )
            return [_row_to_notification(r) for r in fetchall(cur)]

    def unread_count(self, profile_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS c FROM notifications WHERE recipient_profile_id=%s AND is_read=0",
                (int(profile_id),),
            )
            row = fetchone(cur)
            return int(row["c"]) if row else 0

    def mark_read(self, notification_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE id=%s AND is_read=0",
                (at, int(notification_id)),
            )
            return cur.rowcount > 0

    def mark_all_read(self, profile_id: int, *, at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1, read_at=%s WHERE recipient_profile_id=%s AND is_read=0",
                (at, int(profile_id)),
            )
            return int(cur.rowcount)

    def mark_actioned(self, notification_id: int, *, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notifications
                SET is_actioned=1, actioned_at=%s, is_read=1, read_at=COALESCE(read_at, %s)
                WHERE id=%s AND is_actioned=0
                """,
                (at, at, int(notification_id)),
            )
            return cur.rowcount > 0

    def delete(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notifications WHERE id=%s", (int(notification_id),))
            return cur.rowcount > 0
