from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """Domain entity: one in-app notification addressed to one admin."""

    notification_id: int
    user_id: int
    child_id: int
    parent_id: Optional[int]
    type: NotificationType
    message: str
    timestamp: datetime
    read: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "user_id": self.user_id,
            "child_id": self.child_id,
            "parent_id": self.parent_id,
            "type": self.type.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "read": self.read,
        }


@dataclass(frozen=True)
class FanoutReport:
    """Outcome of one fan-out; failures are recorded, never raised."""

    notifications_created: int
    email_sent: bool
    errors: tuple[str, ...] = ()
