from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..children.model import Child
from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, ChildStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, TransitionConflict
from ..database.unit_of_work import Repositories, UnitOfWork
from ..notifications.service import NotificationFanout
from ..users.model import User
from .cooldown import CooldownGuard
from .factory import TransitionFactory
from .model import AttendanceRecord, TransitionResult

logger = logging.getLogger(__name__)

SCAN_ROLES = frozenset({Role.ADMIN, Role.STAFF})


@dataclass(frozen=True)
class _ScanOutcome:
    result: TransitionResult
    child: Child
    parent: Optional[User] = None


def require_role(tx: Repositories, user_id: Optional[int], allowed: frozenset[Role]) -> User:
    actor = tx.users.get_by_id(int(user_id)) if user_id is not None else None
    if not actor or actor.role not in allowed:
        raise AuthorizationError("You are not allowed to perform this action")
    return actor


class AttendanceService:
    """Attendance state machine driven by badge scans.

    Steps up to the status update run in one transaction with the child row
    locked; the notification fan-out runs only after that transaction commits.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        fanout: NotificationFanout,
        *,
        cooldown: CooldownGuard | None = None,
        transitions: TransitionFactory | None = None,
    ):
        self._uow = uow
        self._fanout = fanout
        self._cooldown = cooldown or CooldownGuard()
        self._transitions = transitions or TransitionFactory()

    def process_scan(self, token: str, actor_user_id: int, *, now: datetime | None = None) -> TransitionResult:
        now = now or now_local()
        token = require_non_empty(token, "QR token")

        try:
            outcome = self._uow.with_transaction(lambda tx: self._apply_scan(tx, token, actor_user_id, now))
        except TransitionConflict:
            # Another scan of the same badge won the compare-and-swap.
            logger.info("Concurrent scan of token %s lost the race; reporting no change", token)
            outcome = self._uow.with_transaction(lambda tx: self._unchanged(tx, token, now))

        if outcome.result.changed:
            self._fanout.notify(outcome.child, outcome.parent, outcome.result.status, now)
        return outcome.result

    def _apply_scan(self, tx: Repositories, token: str, actor_user_id: int, now: datetime) -> _ScanOutcome:
        # Lock first: later reads must see whatever the previous holder committed.
        child = tx.children.get_by_qr_code(token, for_update=True)
        require_role(tx, actor_user_id, SCAN_ROLES)
        if not child:
            raise NotFoundError("Unknown QR code")

        if self._cooldown.should_suppress(child.child_id, now, attendance=tx.attendance):
            logger.info("Suppressed repeat scan for child %s", child.child_id)
            return self._no_change(child, now)

        today = now.date()
        open_record = tx.attendance.get_open_for_child_and_date(child.child_id, today)
        strategy = self._transitions.for_status(child.status)

        strategy.write_ledger(
            attendance=tx.attendance,
            child_id=child.child_id,
            today=today,
            open_record=open_record,
            now=now,
        )
        if not tx.children.compare_and_set_status(
            child_id=child.child_id,
            expected_updated_at=child.updated_at,
            status=strategy.next_status,
            updated_at=now,
        ):
            raise TransitionConflict(f"Child {child.child_id} changed during scan")

        parent = tx.users.get_by_id(child.parent_id) if child.parent_id is not None else None
        logger.info("Child %s: %s -> %s", child.child_id, child.status.value, strategy.next_status.value)

        result = TransitionResult(
            child_id=child.child_id,
            name=child.name,
            status=strategy.next_status,
            message=strategy.describe(child.name),
            timestamp=now,
        )
        return _ScanOutcome(result=result, child=child, parent=parent)

    def _unchanged(self, tx: Repositories, token: str, now: datetime) -> _ScanOutcome:
        child = tx.children.get_by_qr_code(token)
        if not child:
            raise NotFoundError("Unknown QR code")
        return self._no_change(child, now)

    @staticmethod
    def _no_change(child: Child, now: datetime) -> _ScanOutcome:
        result = TransitionResult(
            child_id=child.child_id,
            name=child.name,
            status=child.status,
            message=f"No change: {child.name} was scanned moments ago",
            timestamp=now,
            changed=False,
        )
        return _ScanOutcome(result=result, child=child)

    def override_status(
        self,
        child_id: int,
        status: ChildStatus | str,
        actor_user_id: int,
        *,
        now: datetime | None = None,
    ) -> TransitionResult:
        """Admin correction of a child's status; no cooldown, no notifications."""

        now = now or now_local()
        status = require_enum(status, ChildStatus, "status")
        return self._uow.with_transaction(lambda tx: self._apply_override(tx, int(child_id), status, actor_user_id, now))

    def _apply_override(
        self, tx: Repositories, child_id: int, status: ChildStatus, actor_user_id: int, now: datetime
    ) -> TransitionResult:
        child = tx.children.get_by_id(child_id, for_update=True)
        require_role(tx, actor_user_id, frozenset({Role.ADMIN}))
        if not child:
            raise NotFoundError("Child not found")

        today = now.date()
        open_record = tx.attendance.get_open_for_child_and_date(child_id, today)

        if status == ChildStatus.PRESENT:
            if open_record:
                tx.attendance.touch(attendance_id=open_record.attendance_id, updated_at=now)
            else:
                tx.attendance.create_record(
                    child_id=child_id,
                    attendance_date=today,
                    status=AttendanceStatus.PRESENT,
                    check_in_time=now,
                    check_out_time=None,
                    updated_at=now,
                )
        elif status in (ChildStatus.PICKED_UP, ChildStatus.ABSENT):
            ledger_status = AttendanceStatus(status.value)
            if open_record:
                tx.attendance.close_record(
                    attendance_id=open_record.attendance_id,
                    status=ledger_status,
                    check_out_time=now,
                    updated_at=now,
                )
            else:
                tx.attendance.create_record(
                    child_id=child_id,
                    attendance_date=today,
                    status=ledger_status,
                    check_in_time=None,
                    check_out_time=now if status == ChildStatus.PICKED_UP else None,
                    updated_at=now,
                )
        # PICKUP_REQUESTED only lives on the child row.

        if not tx.children.compare_and_set_status(
            child_id=child_id, expected_updated_at=child.updated_at, status=status, updated_at=now
        ):
            raise TransitionConflict(f"Child {child_id} changed during override")

        logger.info("Admin %s set child %s: %s -> %s", actor_user_id, child_id, child.status.value, status.value)
        return TransitionResult(
            child_id=child.child_id,
            name=child.name,
            status=status,
            message=f"{child.name} status set to {status.value}",
            timestamp=now,
        )

    def history(self, child_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        limit = require_positive_int(limit, "limit")

        def _load(tx: Repositories) -> Sequence[AttendanceRecord]:
            if not tx.children.get_by_id(int(child_id)):
                raise NotFoundError("Child not found")
            return tx.attendance.get_recent_for_child(int(child_id), int(limit))

        return self._uow.with_transaction(_load)
