from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEFAULT_SCAN_COOLDOWN_SECONDS
from .repository import AttendanceRepository


class CooldownGuard:
    """Suppress repeat scans of the same badge inside a short time window.

    This is only a time-window check. It must run inside the transaction that
    holds the child row lock, otherwise two scans can both see "not suppressed".
    """

    def __init__(self, threshold: timedelta | float = DEFAULT_SCAN_COOLDOWN_SECONDS):
        if not isinstance(threshold, timedelta):
            threshold = timedelta(seconds=float(threshold))
        if threshold < timedelta(0):
            raise ValueError("Cooldown threshold must not be negative")
        self._threshold = threshold

    @property
    def threshold(self) -> timedelta:
        return self._threshold

    def is_within_window(self, last_update: Optional[datetime], now: datetime) -> bool:
        if last_update is None:
            return False
        return now - last_update < self._threshold

    def should_suppress(self, child_id: int, now: datetime, *, attendance: AttendanceRepository) -> bool:
        return self.is_within_window(attendance.get_last_activity(child_id), now)
