from __future__ import annotations

from datetime import timedelta

import pytest

from kindergarten.core.enums import ChildStatus, Role
from kindergarten.core.exceptions import ValidationError


def test_week_summary_counts_today_and_lists_present_children(
    container, store, staff, lina, fixed_now
):
    store.add_user(11, "Tom Parent", Role.PARENT)
    store.add_child(21, "Minh", 11, "KG-MINH")
    service = container.attendance_service
    service.process_scan(lina.qr_code, staff.user_id, now=fixed_now)
    service.process_scan("KG-MINH", staff.user_id, now=fixed_now - timedelta(days=1))
    service.process_scan("KG-MINH", staff.user_id, now=fixed_now - timedelta(days=1, hours=-8))

    summary = container.report_service.summary("week", today=fixed_now.date())

    assert summary.total_children == 2
    today = summary.daily_stats[0]
    assert today.day == fixed_now.date()
    assert (today.present, today.picked_up) == (1, 0)
    yesterday = summary.daily_stats[1]
    assert (yesterday.present, yesterday.picked_up) == (0, 1)
    assert summary.daily_stats[-1].day == fixed_now.date() - timedelta(days=7)

    [present] = summary.present_children
    assert present.name == "Lina"
    assert present.parent_name == "Jane Doe"
    assert present.status == ChildStatus.PRESENT
    assert present.check_in_time == fixed_now


def test_month_summary_covers_thirty_days(container, fixed_now):
    summary = container.report_service.summary("month", today=fixed_now.date())

    assert summary.daily_stats[-1].day == fixed_now.date() - timedelta(days=30)
    assert summary.weekly_average == 0
    assert summary.monthly_average == 0
    assert summary.present_children == []


def test_summary_rejects_unknown_range(container):
    with pytest.raises(ValidationError):
        container.report_service.summary("year")


def test_summary_to_dict_shape(container, fixed_now):
    body = container.report_service.summary(today=fixed_now.date()).to_dict()

    assert set(body) == {"daily_stats", "weekly_average", "monthly_average", "total_children", "present_children"}
    assert set(body["daily_stats"][0]) == {"date", "present", "absent", "pick_ups", "total"}
