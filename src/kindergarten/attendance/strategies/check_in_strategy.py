from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus, ChildStatus
from ..model import AttendanceRecord
from ..repository import AttendanceRepository
from .base import TransitionStrategy


class CheckInStrategy(TransitionStrategy):
    """ABSENT -> PRESENT: first arrival of the day opens a ledger entry."""

    next_status = ChildStatus.PRESENT

    def write_ledger(
        self,
        *,
        attendance: AttendanceRepository,
        child_id: int,
        today: date,
        open_record: Optional[AttendanceRecord],
        now: datetime,
    ) -> int:
        # Never open a second session for the same day.
        if open_record is not None:
            attendance.touch(attendance_id=open_record.attendance_id, updated_at=now)
            return open_record.attendance_id

        return attendance.create_record(
            child_id=child_id,
            attendance_date=today,
            status=AttendanceStatus.PRESENT,
            check_in_time=now,
            check_out_time=None,
            updated_at=now,
        )

    def describe(self, child_name: str) -> str:
        return f"{child_name} has been checked in"


class ReEntryStrategy(CheckInStrategy):
    """PICKED_UP -> PRESENT: the child came back; a new session is opened."""

    def describe(self, child_name: str) -> str:
        return f"{child_name} has been checked in again"
