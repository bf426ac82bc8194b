from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import ChildStatus
from ..database.mysql_base import fetchall, fetchone
from .model import Child
from .repository import ChildRepository

_COLUMNS = "child_id, name, parent_id, status, qr_code, updated_at"


def _to_child(row: dict) -> Child:
    return Child(
        child_id=int(row["child_id"]),
        name=row["name"],
        parent_id=int(row["parent_id"]) if row.get("parent_id") is not None else None,
        status=ChildStatus(row["status"]),
        qr_code=row["qr_code"],
        updated_at=row.get("updated_at"),
    )


class MySQLChildRepository(ChildRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_by_id(self, child_id: int, *, for_update: bool = False) -> Optional[Child]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(f"SELECT {_COLUMNS} FROM children WHERE child_id=%s{lock}", (int(child_id),))
        row = fetchone(self._cur)
        return _to_child(row) if row else None

    def get_by_qr_code(self, qr_code: str, *, for_update: bool = False) -> Optional[Child]:
        lock = " FOR UPDATE" if for_update else ""
        self._cur.execute(f"SELECT {_COLUMNS} FROM children WHERE qr_code=%s{lock}", (qr_code,))
        row = fetchone(self._cur)
        return _to_child(row) if row else None

    def compare_and_set_status(
        self,
        *,
        child_id: int,
        expected_updated_at: Optional[datetime],
        status: ChildStatus,
        updated_at: datetime,
    ) -> bool:
        # <=> is MySQL's NULL-safe equality; a fresh child has no updated_at yet.
        self._cur.execute(
            """
            UPDATE children
            SET status=%s, updated_at=%s
            WHERE child_id=%s AND updated_at <=> %s
            """,
            (status.value, updated_at, int(child_id), expected_updated_at),
        )
        return self._cur.rowcount > 0

    def list_by_status(self, status: ChildStatus) -> Sequence[Child]:
        self._cur.execute(
            f"SELECT {_COLUMNS} FROM children WHERE status=%s ORDER BY name ASC",
            (status.value,),
        )
        return [_to_child(r) for r in fetchall(self._cur)]

    def count(self) -> int:
        self._cur.execute("SELECT COUNT(*) AS total FROM children")
        row = fetchone(self._cur)
        return int(row["total"]) if row else 0

    def create_child(self, *, name: str, parent_id: int, qr_code: str, status: ChildStatus) -> int:
        self._cur.execute(
            """
            INSERT INTO children(name, parent_id, qr_code, status)
            VALUES(%s,%s,%s,%s)
            """,
            (name, int(parent_id), qr_code, status.value),
        )
        return int(self._cur.lastrowid)

    def qr_code_exists(self, qr_code: str) -> bool:
        self._cur.execute("SELECT 1 AS found FROM children WHERE qr_code=%s", (qr_code,))
        return fetchone(self._cur) is not None
