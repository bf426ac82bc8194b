from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus, ChildStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance session (ledger entry) of a child on a day."""

    attendance_id: int
    child_id: int
    attendance_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    updated_at: datetime

    @property
    def is_open(self) -> bool:
        return self.status == AttendanceStatus.PRESENT and self.check_out_time is None

    def to_dict(self) -> dict:
        return {
            "attendance_id": self.attendance_id,
            "child_id": self.child_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "check_in_time": to_iso(self.check_in_time),
            "check_out_time": to_iso(self.check_out_time),
        }


@dataclass(frozen=True)
class TransitionResult:
    """What a scan, pickup or override reports back to the caller.

    `changed` is False for a suppressed duplicate scan.
    """

    child_id: int
    name: str
    status: ChildStatus
    message: str
    timestamp: datetime
    changed: bool = True

    def to_dict(self) -> dict:
        return {
            "child_id": self.child_id,
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "changed": self.changed,
        }


@dataclass(frozen=True)
class DailyStats:
    """Read-model row: counts for one day of the summary window."""

    day: date
    present: int
    absent: int
    picked_up: int
    total: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "present": self.present,
            "absent": self.absent,
            "pick_ups": self.picked_up,
            "total": self.total,
        }


@dataclass(frozen=True)
class PresentChild:
    child_id: int
    name: str
    parent_name: Optional[str]
    status: ChildStatus
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]

    def to_dict(self) -> dict:
        return {
            "child_id": self.child_id,
            "name": self.name,
            "parent_name": self.parent_name,
            "status": self.status.value,
            "check_in_time": to_iso(self.check_in_time),
            "check_out_time": to_iso(self.check_out_time),
        }


@dataclass(frozen=True)
class AttendanceSummary:
    daily_stats: list[DailyStats]
    weekly_average: int
    monthly_average: int
    total_children: int
    present_children: list[PresentChild] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "daily_stats": [d.to_dict() for d in self.daily_stats],
            "weekly_average": self.weekly_average,
            "monthly_average": self.monthly_average,
            "total_children": self.total_children,
            "present_children": [c.to_dict() for c in self.present_children],
        }
