from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.mysql_base import fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, email, phone_number, role"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row.get("email"),
        phone_number=row.get("phone_number"),
        role=Role(row["role"]),
    )


class MySQLUserRepository(UserRepository):
    """Runs on the cursor of the surrounding unit of work."""

    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, user_id: int) -> Optional[User]:
        self._cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
        row = fetchone(self._cur)
        return _to_user(row) if row else None

    def list_by_role(self, role: Role) -> Sequence[User]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY user_id ASC",
            (role.value,),
        )
        return [_to_user(r) for r in fetchall(self._cur)]
