from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ChildStatus


@dataclass(frozen=True)
class Child:
    """Domain entity: a registered child and its badge token.

    `updated_at` is the time of the last accepted status change and doubles as
    the version used for compare-and-swap updates.
    """

    child_id: int
    name: str
    parent_id: Optional[int]
    status: ChildStatus
    qr_code: str
    updated_at: Optional[datetime] = None
