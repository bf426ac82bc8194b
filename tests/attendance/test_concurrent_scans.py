from __future__ import annotations

import threading

from kindergarten.core.enums import ChildStatus


def test_two_simultaneous_scans_apply_once(container, store, staff, lina, email_sender, fixed_now):
    barrier = threading.Barrier(2)
    results = []
    errors = []

    def scan():
        barrier.wait()
        try:
            results.append(container.attendance_service.process_scan(lina.qr_code, staff.user_id, now=fixed_now))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=scan) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=5)

    assert errors == []
    assert sorted(r.changed for r in results) == [False, True]
    assert store.children[lina.child_id].status == ChildStatus.PRESENT
    assert len(store.records_for(lina.child_id)) == 1
    assert len(store.notifications) == 2
    assert len(email_sender.sent) == 1


def test_lost_compare_and_swap_reports_no_change(container, store, uow, staff, lina, email_sender, fixed_now):
    store.cas_failures = 1

    result = container.attendance_service.process_scan(lina.qr_code, staff.user_id, now=fixed_now)

    assert result.changed is False
    assert result.status == ChildStatus.ABSENT
    # The ledger write from the losing transaction was rolled back.
    assert store.records == {}
    assert store.notifications == {}
    assert email_sender.sent == []
    assert uow.rollbacks == 1
