from decimal import Decimal

import pytest

from attendance_payroll.advances.model import Advance, AdvanceDeduction
from attendance_payroll.core.exceptions import MissingConfigurationError, NotFoundError, ValidationError
from attendance_payroll.settings.model import (
    AttendanceSettings,
    AttendanceTimer,
    MonthlyWorkingDays,
    WorkerTimer,
)

from conftest import OTHER_TENANT, TENANT, make_event, make_worker, utc


def seed_full_day(attendance_repo, worker, day=5):
    attendance_repo.seed(
        make_event(worker, f"2025-03-{day:02d}", "09:00:00 AM", True, utc(2025, 3, day, 3, 30)),
        make_event(worker, f"2025-03-{day:02d}", "05:00:00 PM", False, utc(2025, 3, day, 11, 30)),
    )


def test_worker_reaching_required_hours_gets_full_month(container, worker, attendance_repo):
    seed_full_day(attendance_repo, worker)

    report = container.salary_report_service.generate(TENANT, 2025, 3)

    assert report.month == "2025-03"
    assert report.working_days == 26
    assert report.skipped == ()
    row = report.rows[0]
    assert row.serial_number == 1
    assert row.designation == "Assembly"
    assert row.is_present
    assert row.working_hours == Decimal("8.00")
    assert row.working_days == 26
    assert row.leaves == 0
    assert row.report_per_day_salary == Decimal("1000.00")
    assert row.nominal_per_day_salary == Decimal("866.67")
    assert row.total_salary == Decimal("26000.00")
    assert row.pending_salary == Decimal("26000.00")


def test_events_outside_month_do_not_count(container, worker, attendance_repo):
    attendance_repo.seed(
        make_event(worker, "2025-02-28", "09:00:00 AM", True, utc(2025, 2, 28, 3, 30)),
        make_event(worker, "2025-02-28", "05:00:00 PM", False, utc(2025, 2, 28, 11, 30)),
    )

    row = container.salary_report_service.generate(TENANT, 2025, 3).rows[0]

    assert not row.is_present
    assert row.leaves == 26
    assert row.total_salary == Decimal("0.00")


def test_advance_figures_feed_pending_salary(container, worker, attendance_repo, advances_repo):
    seed_full_day(attendance_repo, worker)
    advances_repo.seed(
        Advance(
            advance_id=1,
            tenant=TENANT,
            worker_id=worker.worker_id,
            amount=Decimal("5000"),
            remaining_amount=Decimal("3500"),
            description="Advance Voucher",
            created_at=utc(2025, 2, 10, 6),
            deductions=(
                AdvanceDeduction(1, 1, Decimal("1000"), "Partial deduction", utc(2025, 2, 20, 6)),
                AdvanceDeduction(2, 1, Decimal("500"), "Partial deduction", utc(2025, 3, 10, 6)),
            ),
        )
    )

    row = container.salary_report_service.generate(TENANT, 2025, 3).rows[0]

    assert row.current_month_advance == Decimal("500.00")
    assert row.previous_advance == Decimal("4000.00")
    assert row.pending_salary == Decimal("21500.00")


def test_per_worker_required_hours(container, worker, attendance_repo, settings_repo):
    settings_repo.put(
        AttendanceSettings(
            tenant=TENANT,
            attendance_timer=AttendanceTimer(
                apply_to_all_workers=False,
                specific_workers=(WorkerTimer(worker_id=worker.worker_id, hours=Decimal("10")),),
            ),
            monthly_working_days=(MonthlyWorkingDays(month="2025-03", working_days=26),),
        )
    )
    seed_full_day(attendance_repo, worker)

    row = container.salary_report_service.generate(TENANT, 2025, 3).rows[0]

    assert row.required_hours == Decimal("10")
    assert not row.is_present


def test_unreadable_events_skip_only_that_worker(container, workers, attendance_repo):
    broken = workers.add(make_worker(2))
    seed_full_day(attendance_repo, workers.get_by_id(TENANT, 1))
    attendance_repo.seed(make_event(broken, "2025-03-05", "garbage", True, utc(2025, 3, 5, 3, 30)))
    seen = []

    report = container.salary_report_service.generate(TENANT, 2025, 3, progress=seen.append)

    assert [r.worker_id for r in report.rows] == [1]
    assert [s.worker_id for s in report.skipped] == [2]
    assert "garbage" in report.skipped[0].reason
    assert seen == [50, 100]


def test_report_is_repeatable(container, worker, attendance_repo):
    seed_full_day(attendance_repo, worker)
    service = container.salary_report_service

    assert service.generate(TENANT, 2025, 3) == service.generate(TENANT, "2025", "03")


def test_other_tenant_data_is_ignored(container, worker, workers, attendance_repo):
    outsider = workers.get_by_id(OTHER_TENANT, 1)
    seed_full_day(attendance_repo, outsider)

    report = container.salary_report_service.generate(TENANT, 2025, 3)

    assert [r.worker_id for r in report.rows] == [worker.worker_id]
    assert not report.rows[0].is_present


def test_missing_configuration_errors(container, workers, settings_repo):
    service = container.salary_report_service

    with pytest.raises(MissingConfigurationError, match="2025-03"):
        service.generate(OTHER_TENANT, 2025, 3)

    workers.add(make_worker(1, tenant="initech"))
    with pytest.raises(NotFoundError, match="Settings not found"):
        service.generate("initech", 2025, 3)

    settings_repo.put(AttendanceSettings(tenant="hooli"))
    with pytest.raises(NotFoundError, match="No workers found"):
        service.generate("hooli", 2025, 3)


@pytest.mark.parametrize("year, month", [(2025, 13), (2025, 0), (1999, 3), ("", 3)])
def test_invalid_period_is_rejected(container, year, month):
    with pytest.raises(ValidationError):
        container.salary_report_service.generate(TENANT, year, month)


def test_worker_summary(container, worker, attendance_repo):
    seed_full_day(attendance_repo, worker)

    summary = container.salary_report_service.worker_summary(TENANT, 2025, 3, worker.worker_id)

    assert summary.rfid == worker.rfid
    assert summary.month == "2025-03"
    assert summary.total_records == 2
    assert summary.row.total_salary == Decimal("26000.00")

    with pytest.raises(NotFoundError):
        container.salary_report_service.worker_summary(TENANT, 2025, 3, 42)
