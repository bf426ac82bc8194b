from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
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
        raise NotImplementedError

    def list_for_user(self, user_id: int, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, *, user_id: int, notification_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, user_id: int) -> int:
        raise NotImplementedError

    def delete_for_user(self, *, user_id: int) -> int:
        raise NotImplementedError
