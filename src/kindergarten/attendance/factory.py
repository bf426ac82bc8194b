from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.enums import ChildStatus
from ..core.exceptions import InvalidStateError
from .strategies.base import TransitionStrategy
from .strategies.check_in_strategy import CheckInStrategy, ReEntryStrategy
from .strategies.pick_up_strategy import PickUpStrategy


def _default_table() -> dict[ChildStatus, TransitionStrategy]:
    return {
        ChildStatus.ABSENT: CheckInStrategy(),
        ChildStatus.PRESENT: PickUpStrategy(),
        ChildStatus.PICKED_UP: ReEntryStrategy(),
    }


@dataclass
class TransitionFactory:
    """Factory Pattern: choose the transition for a child's current status."""

    table: dict[ChildStatus, TransitionStrategy] = field(default_factory=_default_table)

    def for_status(self, current: Any) -> TransitionStrategy:
        try:
            status = ChildStatus(current)
        except ValueError:
            raise InvalidStateError(f"Unknown child status: {current!r}")

        strategy = self.table.get(status)
        if strategy is None:
            raise InvalidStateError(f"No scan transition from status {status.value}")
        return strategy
