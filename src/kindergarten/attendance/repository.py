from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_open_for_child_and_date(self, child_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        """The record with status PRESENT and no check-out for that day, if any."""

        raise NotImplementedError

    def get_latest_for_child_and_date(self, child_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_last_activity(self, child_id: int) -> Optional[datetime]:
        """Most recent `updated_at` across all of the child's records."""

        raise NotImplementedError

    def get_recent_for_child(self, child_id: int, limit: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_record(
        self,
        *,
        child_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
        updated_at: datetime,
    ) -> int:
        raise NotImplementedError

    def close_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        check_out_time: datetime,
        updated_at: datetime,
    ) -> bool:
        raise NotImplementedError

    def touch(self, *, attendance_id: int, updated_at: datetime) -> bool:
        raise NotImplementedError
