from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.mysql_base import fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, child_id, attendance_date, status, check_in_time, check_out_time, updated_at"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        child_id=int(r["child_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        updated_at=r["updated_at"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, cur):
        self._cur = cur

    def get_open_for_child_and_date(self, child_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE child_id=%s AND attendance_date=%s AND status=%s AND check_out_time IS NULL
            ORDER BY attendance_id DESC
            LIMIT 1
            """,
            (int(child_id), attendance_date, AttendanceStatus.PRESENT.value),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def get_latest_for_child_and_date(self, child_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE child_id=%s AND attendance_date=%s
            ORDER BY attendance_id DESC
            LIMIT 1
            """,
            (int(child_id), attendance_date),
        )
        r = fetchone(self._cur)
        return _to_record(r) if r else None

    def get_last_activity(self, child_id: int) -> Optional[datetime]:
        self._cur.execute(
            "SELECT MAX(updated_at) AS last_activity FROM attendance_records WHERE child_id=%s",
            (int(child_id),),
        )
        r = fetchone(self._cur)
        return r.get("last_activity") if r else None

    def get_recent_for_child(self, child_id: int, limit: int) -> Sequence[AttendanceRecord]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE child_id=%s
            ORDER BY attendance_date DESC, attendance_id DESC
            LIMIT %s
            """,
            (int(child_id), int(limit)),
        )
        return [_to_record(r) for r in fetchall(self._cur)]

    def list_between(self, *, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        self._cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_records
            WHERE attendance_date BETWEEN %s AND %s
            ORDER BY attendance_date DESC, attendance_id DESC
            """,
            (start_date, end_date),
        )
        return [_to_record(r) for r in fetchall(self._cur)]

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
        self._cur.execute(
            """
            INSERT INTO attendance_records(child_id, attendance_date, status, check_in_time, check_out_time, updated_at)
            VALUES(%s,%s,%s,%s,%s,%s)
            """,
            (int(child_id), attendance_date, status.value, check_in_time, check_out_time, updated_at),
        )
        return int(self._cur.lastrowid)

    def close_record(
        self,
        *,
        attendance_id: int,
        status: AttendanceStatus,
        check_out_time: datetime,
        updated_at: datetime,
    ) -> bool:
        self._cur.execute(
            """
            UPDATE attendance_records
            SET status=%s, check_out_time=%s, updated_at=%s
            WHERE attendance_id=%s AND check_out_time IS NULL
            """,
            (status.value, check_out_time, updated_at, int(attendance_id)),
        )
        return self._cur.rowcount > 0

    def touch(self, *, attendance_id: int, updated_at: datetime) -> bool:
        self._cur.execute(
            "UPDATE attendance_records SET updated_at=%s WHERE attendance_id=%s",
            (updated_at, int(attendance_id)),
        )
        return self._cur.rowcount > 0
