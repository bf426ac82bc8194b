"""Transaction boundary shared by all services.

Services never open connections themselves: they hand a function to
`UnitOfWork.with_transaction`, which runs it against repositories bound to one
connection and one transaction. Returning normally commits; raising rolls
everything back and re-raises.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, TypeVar

from ..attendance.mysql_attendance_repository import MySQLAttendanceRepository
from ..attendance.repository import AttendanceRepository
from ..children.mysql_child_repository import MySQLChildRepository
from ..children.repository import ChildRepository
from ..notifications.mysql_notification_repository import MySQLNotificationRepository
from ..notifications.repository import NotificationRepository
from ..users.mysql_user_repository import MySQLUserRepository
from ..users.repository import UserRepository
from .connection import DatabaseConnection
from .mysql_base import db_cursor

T = TypeVar("T")


@dataclass(frozen=True)
class Repositories:
    """Repositories that all share the same open transaction."""

    children: ChildRepository
    attendance: AttendanceRepository
    users: UserRepository
    notifications: NotificationRepository


class UnitOfWork(Protocol):
    def with_transaction(self, fn: Callable[[Repositories], T]) -> T:
        raise NotImplementedError


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def with_transaction(self, fn: Callable[[Repositories], T]) -> T:
        with db_cursor(self._conn_factory) as (_, cur):
            repos = Repositories(
                children=MySQLChildRepository(cur),
                attendance=MySQLAttendanceRepository(cur),
                users=MySQLUserRepository(cur),
                notifications=MySQLNotificationRepository(cur),
            )
            return fn(repos)
