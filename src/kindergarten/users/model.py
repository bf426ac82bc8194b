from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a user (admin, staff member or parent).

    Plain data object, no DB access code here.
    """

    user_id: int
    name: str
    email: Optional[str]
    phone_number: Optional[str]
    role: Role
