from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ChildStatus
from .model import Child


class ChildRepository(Protocol):
    def get_by_id(self, child_id: int, *, for_update: bool = False) -> Optional[Child]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str, *, for_update: bool = False) -> Optional[Child]:
        """Resolve a badge token. `for_update` takes a row lock until commit."""

        raise NotImplementedError

    def compare_and_set_status(
        self,
        *,
        child_id: int,
        expected_updated_at: Optional[datetime],
        status: ChildStatus,
        updated_at: datetime,
    ) -> bool:
        """Set status only if `updated_at` still equals the value read earlier."""

        raise NotImplementedError

    def list_by_status(self, status: ChildStatus) -> Sequence[Child]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create_child(self, *, name: str, parent_id: int, qr_code: str, status: ChildStatus) -> int:
        raise NotImplementedError

    def qr_code_exists(self, qr_code: str) -> bool:
        raise NotImplementedError
