from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..children.model import Child
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import ChildStatus, NotificationType, Role
from ..core.exceptions import NotFoundError
from ..database.unit_of_work import Repositories, UnitOfWork
from ..messaging.email_sender import EmailSender
from ..messaging.templates import MessageTemplates
from ..users.model import User
from .model import FanoutReport, Notification

logger = logging.getLogger(__name__)


def notification_type_for(status: ChildStatus) -> NotificationType:
    return NotificationType.CHECK_IN if status == ChildStatus.PRESENT else NotificationType.PICK_UP


class NotificationFanout:
    """Tell every admin about a transition and email the child's parent.

    Runs after the attendance transaction has committed. Nothing in here may
    undo or hide the transition: every failure is logged and reported.
    """

    def __init__(self, uow: UnitOfWork, email_sender: EmailSender, templates: MessageTemplates | None = None):
        self._uow = uow
        self._email = email_sender
        self._templates = templates or MessageTemplates()

    def notify(self, child: Child, parent: Optional[User], new_status: ChildStatus, timestamp: datetime) -> FanoutReport:
        errors: list[str] = []

        created = 0
        try:
            created = self._uow.with_transaction(lambda tx: self._create_rows(tx, child, parent, new_status, timestamp))
        except Exception as e:
            logger.exception("Notification fan-out failed for child %s", child.child_id)
            errors.append(f"notifications: {e}")

        email_sent = False
        if parent is None or not parent.email:
            logger.warning("Child %s has no parent email; skipping attendance email", child.child_id)
        else:
            subject, body = self._templates.email(
                child_name=child.name, parent_name=parent.name, status=new_status, timestamp=timestamp
            )
            try:
                self._email.send(to=parent.email, subject=subject, html_body=body)
                email_sent = True
            except Exception as e:
                logger.error("Attendance email for child %s failed: %s", child.child_id, e)
                errors.append(f"email: {e}")

        return FanoutReport(notifications_created=created, email_sent=email_sent, errors=tuple(errors))

    def _create_rows(
        self,
        tx: Repositories,
        child: Child,
        parent: Optional[User],
        new_status: ChildStatus,
        timestamp: datetime,
    ) -> int:
        kind = notification_type_for(new_status)
        message = self._templates.notification_message(type=kind, child_name=child.name, timestamp=timestamp)
        admins = tx.users.list_by_role(Role.ADMIN)
        for admin in admins:
            tx.notifications.create(
                user_id=admin.user_id,
                child_id=child.child_id,
                parent_id=parent.user_id if parent else child.parent_id,
                type=kind,
                message=message,
                timestamp=timestamp,
            )
        return len(admins)


class NotificationService:
    """Use case: an admin reads and clears their notification inbox."""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def list_for_user(self, user_id: int, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        limit = require_positive_int(limit, "limit")
        return self._uow.with_transaction(lambda tx: tx.notifications.list_for_user(int(user_id), limit))

    def mark_read(self, user_id: int, notification_id: int) -> None:
        notification_id = require_positive_int(notification_id, "id")
        ok = self._uow.with_transaction(
            lambda tx: tx.notifications.mark_read(user_id=int(user_id), notification_id=int(notification_id))
        )
        if not ok:
            raise NotFoundError("Notification not found")

    def mark_all_read(self, user_id: int) -> int:
        return self._uow.with_transaction(lambda tx: tx.notifications.mark_all_read(user_id=int(user_id)))

    def clear(self, user_id: int) -> int:
        return self._uow.with_transaction(lambda tx: tx.notifications.delete_for_user(user_id=int(user_id)))
