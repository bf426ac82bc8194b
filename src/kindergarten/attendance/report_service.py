from __future__ import annotations

from collections import Counter
from datetime import date, timedelta

from ..common.datetime_utils import now_local
from ..core.constants import MONTH_REPORT_DAYS, WEEK_REPORT_DAYS
from ..core.enums import AttendanceStatus, ChildStatus
from ..core.exceptions import ValidationError
from ..database.unit_of_work import Repositories, UnitOfWork
from .model import AttendanceSummary, DailyStats, PresentChild

_RANGES = {"week": WEEK_REPORT_DAYS, "month": MONTH_REPORT_DAYS}


class AttendanceReportService:
    """Read model over the ledger: daily counts, averages, who is here now."""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    def summary(self, range_name: str = "week", *, today: date | None = None) -> AttendanceSummary:
        if range_name not in _RANGES:
            raise ValidationError("range must be 'week' or 'month'")
        today = today or now_local().date()
        start = today - timedelta(days=_RANGES[range_name])
        return self._uow.with_transaction(lambda tx: self._build(tx, start, today))

    def _build(self, tx: Repositories, start: date, today: date) -> AttendanceSummary:
        records = tx.attendance.list_between(start_date=start, end_date=today)
        total = tx.children.count()

        counts: dict[date, Counter] = {}
        for r in records:
            counts.setdefault(r.attendance_date, Counter())[r.status] += 1

        daily: list[DailyStats] = []
        day = today
        while day >= start:
            c = counts.get(day, Counter())
            daily.append(
                DailyStats(
                    day=day,
                    present=c[AttendanceStatus.PRESENT],
                    absent=c[AttendanceStatus.ABSENT],
                    picked_up=c[AttendanceStatus.PICKED_UP],
                    total=total,
                )
            )
            day -= timedelta(days=1)

        last_week = daily[:WEEK_REPORT_DAYS]
        weekly_average = round(sum(d.present for d in last_week) / len(last_week)) if last_week else 0
        monthly_average = round(sum(d.present for d in daily) / len(daily)) if daily else 0

        present = []
        for child in tx.children.list_by_status(ChildStatus.PRESENT):
            parent = tx.users.get_by_id(child.parent_id) if child.parent_id is not None else None
            latest = tx.attendance.get_latest_for_child_and_date(child.child_id, today)
            present.append(
                PresentChild(
                    child_id=child.child_id,
                    name=child.name,
                    parent_name=parent.name if parent else None,
                    status=child.status,
                    check_in_time=latest.check_in_time if latest else None,
                    check_out_time=latest.check_out_time if latest else None,
                )
            )

        return AttendanceSummary(
            daily_stats=daily,
            weekly_average=weekly_average,
            monthly_average=monthly_average,
            total_children=total,
            present_children=present,
        )
