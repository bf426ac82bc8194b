from __future__ import annotations

import logging

from kindergarten.core.enums import ChildStatus, NotificationType, Role


def test_fanout_creates_one_row_per_admin(container, store, lina, parent, fixed_now):
    store.add_user(4, "Admin Three", Role.ADMIN)

    report = container.fanout.notify(lina, parent, ChildStatus.PICKED_UP, fixed_now)

    assert report.notifications_created == 3
    assert report.email_sent is True
    assert report.errors == ()
    rows = list(store.notifications.values())
    assert sorted(n.user_id for n in rows) == [1, 2, 4]
    assert {n.type for n in rows} == {NotificationType.PICK_UP}
    assert rows[0].message == "Lina has been picked up at 08:00"


def test_fanout_without_admins_still_emails_parent(container, store, lina, parent, email_sender, fixed_now):
    for uid in (1, 2):
        del store.users[uid]

    report = container.fanout.notify(lina, parent, ChildStatus.PRESENT, fixed_now)

    assert report.notifications_created == 0
    assert len(email_sender.sent) == 1


def test_fanout_email_failure_is_reported_not_raised(container, store, lina, parent, email_sender, fixed_now, caplog):
    email_sender.fail = True

    with caplog.at_level(logging.ERROR):
        report = container.fanout.notify(lina, parent, ChildStatus.PRESENT, fixed_now)

    assert report.email_sent is False
    assert report.notifications_created == 2
    assert any(e.startswith("email:") for e in report.errors)
    assert "Attendance email" in caplog.text


def test_fanout_skips_email_when_parent_has_none(container, store, lina, email_sender, fixed_now):
    report = container.fanout.notify(lina, None, ChildStatus.PRESENT, fixed_now)

    assert report.email_sent is False
    assert email_sender.sent == []
    assert {n.parent_id for n in store.notifications.values()} == {lina.parent_id}


def test_email_body_mentions_child_and_time(container, lina, parent, email_sender, fixed_now):
    container.fanout.notify(lina, parent, ChildStatus.PRESENT, fixed_now)

    body = email_sender.sent[0]["html_body"]
    assert "Dear Jane Doe," in body
    assert "Lina arrived at the kindergarten on 2026-03-02 at 08:00." in body
