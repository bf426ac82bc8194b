from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.mysql_base import fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, cur):
        self._cur = cur

    def create(
        self,
        *,
        user_id: int,
        child_id: int,
        parent_id: Optional[int],
        type: NotificationType,
        message: str,
        timestamp: datetime,
    ) -> int:
        self._cur.execute(
            """
            INSERT INTO notifications(user_id, child_id, parent_id, type, message, timestamp, is_read)
            VALUES(%s,%s,%s,%s,%s,%s,0)
            """,
            (int(user_id), int(child_id), parent_id, type.value, message, timestamp),
        )
        return int(self._cur.lastrowid)

    def list_for_user(self, user_id: int, limit: int) -> Sequence[Notification]:
        self._cur.execute(
            """
            SELECT notification_id, user_id, child_id, parent_id, type, message, timestamp, is_read
            FROM notifications
            WHERE user_id=%s
            ORDER BY timestamp DESC, notification_id DESC
            LIMIT %s
            """,
            (int(user_id), int(limit)),
        )
        return [
            Notification(
                notification_id=int(r["notification_id"]),
                user_id=int(r["user_id"]),
                child_id=int(r["child_id"]),
                parent_id=r.get("parent_id"),
                type=NotificationType(r["type"]),
                message=r["message"],
                timestamp=r["timestamp"],
                read=bool(r["is_read"]),
            )
            for r in fetchall(self._cur)
        ]

    def mark_read(self, *, user_id: int, notification_id: int) -> bool:
        self._cur.execute(
            "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND user_id=%s",
            (int(notification_id), int(user_id)),
        )
        return self._cur.rowcount > 0

    def mark_all_read(self, *, user_id: int) -> int:
        self._cur.execute(
            "UPDATE notifications SET is_read=1 WHERE user_id=%s AND is_read=0",
            (int(user_id),),
        )
        return int(self._cur.rowcount)

    def delete_for_user(self, *, user_id: int) -> int:
        self._cur.execute("DELETE FROM notifications WHERE user_id=%s", (int(user_id),))
        return int(self._cur.rowcount)
