from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Callable, Optional

import pytest

from kindergarten.attendance.model import AttendanceRecord
from kindergarten.children.model import Child
from kindergarten.container import build_services
from kindergarten.core.enums import AttendanceStatus, ChildStatus, Role
from kindergarten.core.exceptions import NotificationDeliveryFailure
from kindergarten.database.unit_of_work import Repositories
from kindergarten.notifications.model import Notification
from kindergarten.users.model import User


@dataclass
class InMemoryStore:
    users: dict[int, User] = field(default_factory=dict)
    children: dict[int, Child] = field(default_factory=dict)
    records: dict[int, AttendanceRecord] = field(default_factory=dict)
    notifications: dict[int, Notification] = field(default_factory=dict)
    next_id: int = 100
    # Forces the next N compare-and-swap calls to fail, as if another request won.
    cas_failures: int = 0
    fail_notifications: bool = False

    def new_id(self) -> int:
        self.next_id += 1
        return self.next_id

    def add_user(self, user_id: int, name: str, role: Role, *, email=None, phone=None) -> User:
        user = User(user_id=user_id, name=name, email=email, phone_number=phone, role=role)
        self.users[user_id] = user
        return user

    def add_child(self, child_id: int, name: str, parent_id: int, qr_code: str, status=ChildStatus.ABSENT) -> Child:
        child = Child(child_id=child_id, name=name, parent_id=parent_id, status=status, qr_code=qr_code)
        self.children[child_id] = child
        return child

    def records_for(self, child_id: int) -> list[AttendanceRecord]:
        return sorted((r for r in self.records.values() if r.child_id == child_id), key=lambda r: r.attendance_id)


class InMemoryUsers:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._s.users.get(int(user_id))

    def list_by_role(self, role: Role):
        return [u for u in sorted(self._s.users.values(), key=lambda u: u.user_id) if u.role == role]


class InMemoryChildren:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_by_id(self, child_id: int, *, for_update: bool = False) -> Optional[Child]:
        return self._s.children.get(int(child_id))

    def get_by_qr_code(self, qr_code: str, *, for_update: bool = False) -> Optional[Child]:
        return next((c for c in self._s.children.values() if c.qr_code == qr_code), None)

    def compare_and_set_status(self, *, child_id, expected_updated_at, status, updated_at) -> bool:
        if self._s.cas_failures > 0:
            self._s.cas_failures -= 1
            return False
        child = self._s.children.get(int(child_id))
        if not child or child.updated_at != expected_updated_at:
            return False
        self._s.children[child.child_id] = replace(child, status=status, updated_at=updated_at)
        return True

    def list_by_status(self, status: ChildStatus):
        return sorted((c for c in self._s.children.values() if c.status == status), key=lambda c: c.name)

    def count(self) -> int:
        return len(self._s.children)

    def create_child(self, *, name, parent_id, qr_code, status) -> int:
        cid = self._s.new_id()
        self._s.children[cid] = Child(child_id=cid, name=name, parent_id=parent_id, status=status, qr_code=qr_code)
        return cid

    def qr_code_exists(self, qr_code: str) -> bool:
        return any(c.qr_code == qr_code for c in self._s.children.values())


class InMemoryAttendance:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def get_open_for_child_and_date(self, child_id: int, attendance_date: date):
        rows = [r for r in self._s.records_for(child_id) if r.attendance_date == attendance_date and r.is_open]
        return rows[-1] if rows else None

    def get_latest_for_child_and_date(self, child_id: int, attendance_date: date):
        rows = [r for r in self._s.records_for(child_id) if r.attendance_date == attendance_date]
        return rows[-1] if rows else None

    def get_last_activity(self, child_id: int):
        stamps = [r.updated_at for r in self._s.records_for(child_id)]
        return max(stamps) if stamps else None

    def get_recent_for_child(self, child_id: int, limit: int):
        rows = sorted(self._s.records_for(child_id), key=lambda r: (r.attendance_date, r.attendance_id), reverse=True)
        return rows[:limit]

    def list_between(self, *, start_date: date, end_date: date):
        return [r for r in self._s.records.values() if start_date <= r.attendance_date <= end_date]

    def create_record(self, *, child_id, attendance_date, status, check_in_time, check_out_time, updated_at) -> int:
        rid = self._s.new_id()
        self._s.records[rid] = AttendanceRecord(
            attendance_id=rid,
            child_id=child_id,
            attendance_date=attendance_date,
            status=status,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            updated_at=updated_at,
        )
        return rid

    def close_record(self, *, attendance_id, status, check_out_time, updated_at) -> bool:
        rec = self._s.records.get(int(attendance_id))
        if not rec or rec.check_out_time is not None:
            return False
        self._s.records[rec.attendance_id] = replace(
            rec, status=status, check_out_time=check_out_time, updated_at=updated_at
        )
        return True

    def touch(self, *, attendance_id, updated_at) -> bool:
        rec = self._s.records.get(int(attendance_id))
        if not rec:
            return False
        self._s.records[rec.attendance_id] = replace(rec, updated_at=updated_at)
        return True


class InMemoryNotifications:
    def __init__(self, store: InMemoryStore):
        self._s = store

    def create(self, *, user_id, child_id, parent_id, type, message, timestamp) -> int:
        if self._s.fail_notifications:
            raise RuntimeError("notifications table unavailable")
        nid = self._s.new_id()
        self._s.notifications[nid] = Notification(
            notification_id=nid,
            user_id=user_id,
            child_id=child_id,
            parent_id=parent_id,
            type=type,
            message=message,
            timestamp=timestamp,
        )
        return nid

    def list_for_user(self, user_id: int, limit: int):
        rows = [n for n in self._s.notifications.values() if n.user_id == user_id]
        rows.sort(key=lambda n: (n.timestamp, n.notification_id), reverse=True)
        return rows[:limit]

    def mark_read(self, *, user_id, notification_id) -> bool:
        n = self._s.notifications.get(int(notification_id))
        if not n or n.user_id != user_id:
            return False
        self._s.notifications[n.notification_id] = replace(n, read=True)
        return True

    def mark_all_read(self, *, user_id) -> int:
        changed = 0
        for n in list(self._s.notifications.values()):
            if n.user_id == user_id and not n.read:
                self._s.notifications[n.notification_id] = replace(n, read=True)
                changed += 1
        return changed

    def delete_for_user(self, *, user_id) -> int:
        ids = [n.notification_id for n in self._s.notifications.values() if n.user_id == user_id]
        for nid in ids:
            del self._s.notifications[nid]
        return len(ids)


class InMemoryUnitOfWork:
    """Serializes transactions with a lock and rolls back by snapshot."""

    def __init__(self, store: InMemoryStore):
        self.store = store
        self._lock = threading.Lock()
        self.commits = 0
        self.rollbacks = 0

    def with_transaction(self, fn: Callable[[Repositories], object]):
        with self._lock:
            snapshot = copy.deepcopy(
                (self.store.users, self.store.children, self.store.records, self.store.notifications)
            )
            repos = Repositories(
                children=InMemoryChildren(self.store),
                attendance=InMemoryAttendance(self.store),
                users=InMemoryUsers(self.store),
                notifications=InMemoryNotifications(self.store),
            )
            try:
                result = fn(repos)
            except Exception:
                (self.store.users, self.store.children, self.store.records, self.store.notifications) = snapshot
                self.rollbacks += 1
                raise
            self.commits += 1
            return result


class RecordingEmailSender:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send(self, *, to: str, subject: str, html_body: str) -> None:
        if self.fail:
            raise NotificationDeliveryFailure("SMTP down")
        self.sent.append({"to": to, "subject": subject, "html_body": html_body})


class RecordingSmsSender:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send(self, *, to: str, body: str) -> None:
        if self.fail:
            raise NotificationDeliveryFailure("gateway down")
        self.sent.append({"to": to, "body": body})


ADMIN_IDS = (1, 2)
STAFF_ID = 3
PARENT_ID = 10
LINA_ID = 20
LINA_TOKEN = "KG-LINA"


@pytest.fixture
def store() -> InMemoryStore:
    s = InMemoryStore()
    s.add_user(1, "Admin One", Role.ADMIN, email="admin1@kindergarten.com")
    s.add_user(2, "Admin Two", Role.ADMIN, email="admin2@kindergarten.com")
    s.add_user(STAFF_ID, "Sara Staff", Role.STAFF)
    s.add_user(PARENT_ID, "Jane Doe", Role.PARENT, email="jane@example.com", phone="+1234567890")
    s.add_child(LINA_ID, "Lina", PARENT_ID, LINA_TOKEN)
    return s


@pytest.fixture
def uow(store) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(store)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def sms_sender() -> RecordingSmsSender:
    return RecordingSmsSender()


@pytest.fixture
def container(uow, email_sender, sms_sender):
    return build_services(uow, email_sender=email_sender, sms_sender=sms_sender, cooldown_seconds=1.0)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def open_record_factory(store):
    """Put an open PRESENT session in the ledger and mark the child PRESENT."""

    def _make(child_id: int, at: datetime) -> AttendanceRecord:
        rid = store.new_id()
        rec = AttendanceRecord(
            attendance_id=rid,
            child_id=child_id,
            attendance_date=at.date(),
            status=AttendanceStatus.PRESENT,
            check_in_time=at,
            check_out_time=None,
            updated_at=at,
        )
        store.records[rid] = rec
        store.children[child_id] = replace(store.children[child_id], status=ChildStatus.PRESENT, updated_at=at)
        return rec

    return _make


@pytest.fixture
def staff(store) -> User:
    return store.users[STAFF_ID]


@pytest.fixture
def admin(store) -> User:
    return store.users[ADMIN_IDS[0]]


@pytest.fixture
def parent(store) -> User:
    return store.users[PARENT_ID]


@pytest.fixture
def lina(store) -> Child:
    return store.children[LINA_ID]
