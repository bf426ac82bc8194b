from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..children.model import Child
from ..common.datetime_utils import now_local
from ..common.validators import require_enum, require_non_empty, require_positive_int
from ..core.enums import AttendanceStatus, ChildStatus, PickupActor
from ..core.exceptions import NotFoundError, TransitionConflict
from ..database.unit_of_work import Repositories, UnitOfWork
from ..attendance.model import TransitionResult
from ..messaging.sms_sender import SmsSender
from ..messaging.templates import MessageTemplates
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _PickupOutcome:
    child: Child
    parent: Optional[User]


class PickupService:
    """Use case: register a pickup without a badge scan and text the parent."""

    def __init__(
        self,
        uow: UnitOfWork,
        sms_sender: SmsSender,
        templates: MessageTemplates | None = None,
        *,
        repair_drift: bool = True,
    ):
        self._uow = uow
        self._sms = sms_sender
        self._templates = templates or MessageTemplates()
        self._repair_drift = repair_drift

    def register_pickup(
        self,
        child_id: int,
        pickup_by: PickupActor | str,
        pickup_by_name: Optional[str] = None,
        *,
        now: datetime | None = None,
    ) -> TransitionResult:
        now = now or now_local()
        actor = require_enum(pickup_by, PickupActor, "pickup_by")
        name = require_non_empty(pickup_by_name, "pickup_by_name") if actor == PickupActor.OTHER else None

        child_id = require_positive_int(child_id, "child_id")
        outcome = self._uow.with_transaction(lambda tx: self._close_session(tx, child_id, now))

        message = self._templates.pickup_sms(child_name=outcome.child.name, picked_up_by=name, timestamp=now)
        self._send_sms(outcome.child, outcome.parent, message)

        return TransitionResult(
            child_id=outcome.child.child_id,
            name=outcome.child.name,
            status=ChildStatus.PICKED_UP,
            message=message,
            timestamp=now,
        )

    def _close_session(self, tx: Repositories, child_id: int, now: datetime) -> _PickupOutcome:
        child = tx.children.get_by_id(child_id, for_update=True)
        if not child:
            raise NotFoundError("Child not found")

        today = now.date()
        record = tx.attendance.get_open_for_child_and_date(child_id, today)
        if record is None:
            if not (self._repair_drift and child.status == ChildStatus.PRESENT):
                raise NotFoundError("No active attendance record found")
            # Child says PRESENT but today's ledger has no open session.
            logger.warning("Child %s is PRESENT without an open attendance record; creating one", child_id)
            attendance_id = tx.attendance.create_record(
                child_id=child_id,
                attendance_date=today,
                status=AttendanceStatus.PRESENT,
                check_in_time=now,
                check_out_time=None,
                updated_at=now,
            )
        else:
            attendance_id = record.attendance_id

        tx.attendance.close_record(
            attendance_id=attendance_id,
            status=AttendanceStatus.PICKED_UP,
            check_out_time=now,
            updated_at=now,
        )
        if not tx.children.compare_and_set_status(
            child_id=child_id,
            expected_updated_at=child.updated_at,
            status=ChildStatus.PICKED_UP,
            updated_at=now,
        ):
            raise TransitionConflict(f"Child {child_id} changed during pickup")

        parent = tx.users.get_by_id(child.parent_id) if child.parent_id is not None else None
        return _PickupOutcome(child=child, parent=parent)

    def _send_sms(self, child: Child, parent: Optional[User], message: str) -> bool:
        if parent is None or not parent.phone_number:
            logger.warning("Child %s has no parent phone number; pickup SMS skipped", child.child_id)
            return False
        try:
            self._sms.send(to=parent.phone_number, body=message)
            return True
        except Exception as e:
            logger.error("Pickup SMS for child %s failed: %s", child.child_id, e)
            return False
