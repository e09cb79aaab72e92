from datetime import time

from attendance_payroll.attendance.auto_closer import DailyAutoCloser

from conftest import OTHER_TENANT, TZ, InMemoryAttendance, make_event, make_worker, utc

# 23:00 in Asia/Kolkata
CLOSE_AT = utc(2025, 3, 5, 17, 30)


def test_closes_open_sessions_of_every_tenant(container, workers, attendance_repo):
    acme = workers.get_by_id("acme", 1)
    globex = workers.get_by_id(OTHER_TENANT, 1)
    done = workers.add(make_worker(2))
    attendance_repo.seed(
        make_event(acme, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)),
        make_event(globex, "2025-03-05", "10:00:00 AM", True, utc(2025, 3, 5, 4, 30)),
        make_event(done, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)),
        make_event(done, "2025-03-05", "05:00:00 PM", False, utc(2025, 3, 5, 11, 30)),
        make_event(acme, "2025-03-04", "09:00:00 AM", True, utc(2025, 3, 4, 3, 30)),
    )

    report = container.auto_closer.run(now=CLOSE_AT)

    assert report.day == "2025-03-05"
    assert report.inspected == 3
    assert report.failed == []
    assert sorted((e.tenant, e.rfid) for e in report.closed) == [("acme", acme.rfid), (OTHER_TENANT, globex.rfid)]
    for event in report.closed:
        assert event.presence is False
        assert event.clock_time == "11:00:00 PM"
        assert event.work_date == "2025-03-05"
        assert event.is_missed_out_punch is True


def test_second_run_closes_nothing(container, workers, attendance_repo):
    acme = workers.get_by_id("acme", 1)
    attendance_repo.seed(make_event(acme, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)))

    first = container.auto_closer.run(now=CLOSE_AT)
    second = container.auto_closer.run(now=utc(2025, 3, 5, 17, 31))

    assert len(first.closed) == 1
    assert second.closed == []
    assert len(attendance_repo.events) == 2


def test_one_failure_does_not_stop_the_sweep(container, workers, attendance_repo):
    orphan = workers.add(make_worker(3, department_id=99))
    acme = workers.get_by_id("acme", 1)
    attendance_repo.seed(
        make_event(orphan, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)),
        make_event(acme, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)),
    )

    report = container.auto_closer.run(now=CLOSE_AT)

    assert [e.rfid for e in report.closed] == [acme.rfid]
    assert len(report.failed) == 1
    assert report.failed[0].rfid == orphan.rfid
    assert "Department not found" in report.failed[0].reason


def test_close_time_is_configurable(workers, departments, attendance_repo):
    acme = workers.get_by_id("acme", 1)
    attendance_repo.seed(make_event(acme, "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)))
    closer = DailyAutoCloser(attendance_repo, workers, departments, timezone=TZ, close_time=time(22, 30))

    report = closer.run(now=CLOSE_AT)

    assert report.closed[0].clock_time == "10:30:00 PM"


class FlakyAttendance(InMemoryAttendance):
    def __init__(self, broken_tenant):
        super().__init__()
        self._broken_tenant = broken_tenant

    def list_latest_per_worker(self, *, tenant, work_date):
        if tenant == self._broken_tenant:
            raise RuntimeError("connection lost")
        return super().list_latest_per_worker(tenant=tenant, work_date=work_date)


def test_tenant_listing_failure_does_not_stop_other_tenants(workers, departments):
    attendance = FlakyAttendance("acme")
    globex = workers.get_by_id(OTHER_TENANT, 1)
    attendance.seed(
        make_event(workers.get_by_id("acme", 1), "2025-03-05", "09:00:00 AM", True, utc(2025, 3, 5, 3, 30)),
        make_event(globex, "2025-03-05", "10:00:00 AM", True, utc(2025, 3, 5, 4, 30)),
    )
    closer = DailyAutoCloser(attendance, workers, departments, timezone=TZ)

    report = closer.run(now=CLOSE_AT)

    assert [(e.tenant, e.rfid) for e in report.closed] == [(OTHER_TENANT, globex.rfid)]
    assert len(report.failed) == 1
    assert report.failed[0].tenant == "acme"
    assert report.failed[0].rfid is None
    assert report.failed[0].reason == "connection lost"
