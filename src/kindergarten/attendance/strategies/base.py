from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Optional

from ...core.enums import ChildStatus
from ..model import AttendanceRecord
from ..repository import AttendanceRepository


class TransitionStrategy(ABC):
    """Strategy Pattern: one row of the attendance transition table.

    A strategy knows the status it moves a child to and how that move is
    written to the day's ledger.
    """

    next_status: ChildStatus

    @abstractmethod
    def write_ledger(
        self,
        *,
        attendance: AttendanceRepository,
        child_id: int,
        today: date,
        open_record: Optional[AttendanceRecord],
        now: datetime,
    ) -> int:
        """Create or update the ledger entry; returns its id."""

        raise NotImplementedError

    @abstractmethod
    def describe(self, child_name: str) -> str:
        raise NotImplementedError
