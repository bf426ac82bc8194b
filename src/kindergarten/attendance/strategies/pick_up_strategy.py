from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ...core.enums import AttendanceStatus, ChildStatus
from ..model import AttendanceRecord
from ..repository import AttendanceRepository
from .base import TransitionStrategy


class PickUpStrategy(TransitionStrategy):
    """PRESENT -> PICKED_UP: closes today's open session."""

    next_status = ChildStatus.PICKED_UP

    def write_ledger(
        self,
        *,
        attendance: AttendanceRepository,
        child_id: int,
        today: date,
        open_record: Optional[AttendanceRecord],
        now: datetime,
    ) -> int:
        if open_record is not None:
            attendance.close_record(
                attendance_id=open_record.attendance_id,
                status=AttendanceStatus.PICKED_UP,
                check_out_time=now,
                updated_at=now,
            )
            return open_record.attendance_id

        # Checked in on an earlier day: yesterday's entry stays untouched.
        return attendance.create_record(
            child_id=child_id,
            attendance_date=today,
            status=AttendanceStatus.PICKED_UP,
            check_in_time=None,
            check_out_time=now,
            updated_at=now,
        )

    def describe(self, child_name: str) -> str:
        return f"{child_name} has been picked up"
