from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional

import pytest

from attendance_payroll.advances.model import Advance, AdvanceDeduction
from attendance_payroll.attendance.model import AttendanceEvent, EventDraft
from attendance_payroll.container import build_services
from attendance_payroll.core.enums import LeaveStatus
from attendance_payroll.jobs.service import JobRunner
from attendance_payroll.jobs.store import InMemoryJobStore
from attendance_payroll.leaves.model import Leave
from attendance_payroll.settings.model import AttendanceSettings, MonthlyWorkingDays
from attendance_payroll.workers.department_model import Department
from attendance_payroll.workers.model import Worker

TENANT = "acme"
OTHER_TENANT = "globex"
TZ = "Asia/Kolkata"


def make_worker(
    worker_id: int = 1,
    *,
    tenant: str = TENANT,
    salary: str = "26000",
    final_salary: Optional[str] = None,
    rfid: Optional[str] = None,
    department_id: int = 10,
) -> Worker:
    salary_d = Decimal(salary)
    return Worker(
        worker_id=worker_id,
        tenant=tenant,
        name=f"Worker {worker_id}",
        username=f"{tenant}-w{worker_id}",
        rfid=rfid or f"{tenant.upper()}-{worker_id:04d}",
        department_id=department_id,
        salary=salary_d,
        final_salary=Decimal(final_salary) if final_salary is not None else salary_d,
        nominal_per_day_salary=salary_d / Decimal(30),
    )


def make_event(
    worker: Worker,
    work_date: str,
    clock_time: str,
    presence: bool,
    created_at: datetime,
    *,
    event_id: int = 0,
    is_missed_out_punch: bool = False,
) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=event_id,
        tenant=worker.tenant,
        worker_id=worker.worker_id,
        rfid=worker.rfid,
        worker_name=worker.name,
        username=worker.username,
        department_id=worker.department_id,
        department_name="Assembly",
        work_date=work_date,
        clock_time=clock_time,
        presence=presence,
        created_at=created_at,
        is_missed_out_punch=is_missed_out_punch,
    )


def utc(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


class InMemoryWorkers:
    def __init__(self, workers=()):
        self._rows: dict[tuple[str, int], Worker] = {(w.tenant, w.worker_id): w for w in workers}

    def add(self, worker: Worker) -> Worker:
        self._rows[(worker.tenant, worker.worker_id)] = worker
        return worker

    def get_by_id(self, tenant: str, worker_id: int) -> Optional[Worker]:
        return self._rows.get((tenant, int(worker_id)))

    def get_by_rfid(self, tenant: str, rfid: str) -> Optional[Worker]:
        for (t, _), w in self._rows.items():
            if t == tenant and w.rfid == rfid:
                return w
        return None

    def find_by_rfid(self, rfid: str) -> Optional[Worker]:
        for w in self._rows.values():
            if w.rfid == rfid:
                return w
        return None

    def list_for_tenant(self, tenant: str):
        return sorted((w for (t, _), w in self._rows.items() if t == tenant), key=lambda w: w.worker_id)

    def adjust_final_salary(self, *, tenant: str, worker_id: int, delta: Decimal) -> bool:
        w = self.get_by_id(tenant, worker_id)
        if not w:
            return False
        self.add(replace(w, final_salary=w.final_salary + delta))
        return True

    def update_salary(self, *, tenant, worker_id, salary, final_salary, nominal_per_day_salary) -> bool:
        w = self.get_by_id(tenant, worker_id)
        if not w:
            return False
        self.add(replace(w, salary=salary, final_salary=final_salary, nominal_per_day_salary=nominal_per_day_salary))
        return True

    def reset_final_salaries(self, tenant: str) -> int:
        workers = self.list_for_tenant(tenant)
        for w in workers:
            self.add(replace(w, final_salary=w.salary))
        return len(workers)


class InMemoryDepartments:
    def __init__(self, departments=()):
        self._rows: dict[tuple[str, int], Department] = {(d.tenant, d.department_id): d for d in departments}

    def get_by_id(self, tenant: str, department_id: int) -> Optional[Department]:
        return self._rows.get((tenant, int(department_id)))

    def list_for_tenant(self, tenant: str):
        return [d for (t, _), d in self._rows.items() if t == tenant]


class InMemorySettings:
    def __init__(self, settings=()):
        self._rows: dict[str, AttendanceSettings] = {s.tenant: s for s in settings}

    def put(self, settings: AttendanceSettings) -> None:
        self._rows[settings.tenant] = settings

    def get_for_tenant(self, tenant: str) -> Optional[AttendanceSettings]:
        return self._rows.get(tenant)

    def reset_daily_email_flags(self) -> int:
        count = 0
        for tenant, s in list(self._rows.items()):
            if s.email_sent_today:
                self._rows[tenant] = replace(s, email_sent_today=False, last_email_sent=None)
                count += 1
        return count


class InMemoryAttendance:
    def __init__(self):
        self.events: list[AttendanceEvent] = []
        self._id = 0

    def create_event(self, draft: EventDraft) -> AttendanceEvent:
        self._id += 1
        event = draft.persisted(self._id)
        self.events.append(event)
        return event

    def seed(self, *events: AttendanceEvent) -> None:
        for e in events:
            self._id += 1
            self.events.append(replace(e, event_id=self._id))

    def get_last_for_worker(self, *, tenant: str, rfid: str) -> Optional[AttendanceEvent]:
        mine = [e for e in self.events if e.tenant == tenant and e.rfid == rfid]
        return max(mine, key=lambda e: (e.created_at, e.event_id)) if mine else None

    def list_range(self, *, tenant: str, start: date, end: date, worker_id: Optional[int] = None):
        rows = [
            e
            for e in self.events
            if e.tenant == tenant
            and start.isoformat() <= e.work_date < end.isoformat()
            and (worker_id is None or e.worker_id == worker_id)
        ]
        return sorted(rows, key=lambda e: (e.created_at, e.event_id))

    def list_for_worker(self, *, tenant: str, rfid: str):
        rows = [e for e in self.events if e.tenant == tenant and e.rfid == rfid]
        return sorted(rows, key=lambda e: (e.created_at, e.event_id))

    def list_tenants_for_day(self, work_date: str):
        return sorted({e.tenant for e in self.events if e.work_date == work_date})

    def list_latest_per_worker(self, *, tenant: str, work_date: str):
        latest: dict[str, AttendanceEvent] = {}
        for e in self.events:
            if e.tenant != tenant or e.work_date != work_date:
                continue
            current = latest.get(e.rfid)
            if current is None or (e.created_at, e.event_id) > (current.created_at, current.event_id):
                latest[e.rfid] = e
        return [latest[k] for k in sorted(latest)]


class InMemoryAdvances:
    def __init__(self, workers: InMemoryWorkers):
        self._workers = workers
        self._rows: dict[tuple[str, int], Advance] = {}
        self._id = 0
        self._deduction_id = 0

    def seed(self, advance: Advance) -> Advance:
        self._rows[(advance.tenant, advance.advance_id)] = advance
        self._id = max(self._id, advance.advance_id)
        return advance

    def get_by_id(self, tenant: str, advance_id: int) -> Optional[Advance]:
        return self._rows.get((tenant, int(advance_id)))

    def list_for_tenant(self, tenant: str):
        return [a for (t, _), a in self._rows.items() if t == tenant]

    def list_for_worker(self, tenant: str, worker_id: int):
        return [a for a in self.list_for_tenant(tenant) if a.worker_id == int(worker_id)]

    def issue(self, *, tenant, worker_id, amount, description, approved_by, created_at) -> Advance:
        self._id += 1
        advance = Advance(
            advance_id=self._id,
            tenant=tenant,
            worker_id=int(worker_id),
            amount=amount,
            remaining_amount=amount,
            description=description,
            approved_by=approved_by,
            created_at=created_at,
        )
        self._rows[(tenant, advance.advance_id)] = advance
        self._workers.adjust_final_salary(tenant=tenant, worker_id=worker_id, delta=-amount)
        return advance

    def record_deduction(self, *, tenant, advance_id, amount, description, deducted_at) -> Optional[Advance]:
        advance = self.get_by_id(tenant, advance_id)
        if advance is None or advance.remaining_amount < amount:
            return None
        self._deduction_id += 1
        deduction = AdvanceDeduction(
            deduction_id=self._deduction_id,
            advance_id=advance.advance_id,
            amount=amount,
            description=description,
            deducted_at=deducted_at,
        )
        updated = replace(
            advance,
            remaining_amount=advance.remaining_amount - amount,
            deductions=advance.deductions + (deduction,),
        )
        self._rows[(tenant, advance.advance_id)] = updated
        self._workers.adjust_final_salary(tenant=tenant, worker_id=advance.worker_id, delta=amount)
        return updated


class InMemoryLeaves:
    def __init__(self, workers: InMemoryWorkers):
        self._workers = workers
        self._rows: dict[tuple[str, int], Leave] = {}
        self._id = 0

    def create(self, *, tenant, worker_id, leave_type, start_date, end_date, total_days, reason, start_time, end_time, created_at) -> Leave:
        self._id += 1
        leave = Leave(
            leave_id=self._id,
            tenant=tenant,
            worker_id=int(worker_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=created_at,
            start_time=start_time,
            end_time=end_time,
        )
        self._rows[(tenant, leave.leave_id)] = leave
        return leave

    def get_by_id(self, tenant: str, leave_id: int) -> Optional[Leave]:
        return self._rows.get((tenant, int(leave_id)))

    def list_for_tenant(self, tenant: str, *, status=None):
        return [lv for (t, _), lv in self._rows.items() if t == tenant and (status is None or lv.status == status)]

    def set_status(self, *, tenant, leave_id, status, worker_id=None, salary_deduction=None) -> bool:
        leave = self.get_by_id(tenant, leave_id)
        if not leave:
            return False
        self._rows[(tenant, leave.leave_id)] = replace(leave, status=status)
        if worker_id is not None and salary_deduction is not None:
            w = self._workers.get_by_id(tenant, worker_id)
            self._workers.add(replace(w, final_salary=max(Decimal("0"), w.final_salary - salary_deduction)))
        return True


@pytest.fixture
def fixed_now() -> datetime:
    # 10:00 in Asia/Kolkata
    return utc(2025, 3, 5, 4, 30)


@pytest.fixture
def worker() -> Worker:
    return make_worker(1)


@pytest.fixture
def workers(worker) -> InMemoryWorkers:
    return InMemoryWorkers([worker, make_worker(1, tenant=OTHER_TENANT)])


@pytest.fixture
def departments() -> InMemoryDepartments:
    return InMemoryDepartments(
        [
            Department(department_id=10, tenant=TENANT, name="Assembly"),
            Department(department_id=10, tenant=OTHER_TENANT, name="Packing"),
        ]
    )


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings(
        [
            AttendanceSettings(
                tenant=TENANT,
                monthly_working_days=(MonthlyWorkingDays(month="2025-03", working_days=26),),
            ),
            AttendanceSettings(tenant=OTHER_TENANT),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def advances_repo(workers) -> InMemoryAdvances:
    return InMemoryAdvances(workers)


@pytest.fixture
def leaves_repo(workers) -> InMemoryLeaves:
    return InMemoryLeaves(workers)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=1)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def container(workers, departments, attendance_repo, settings_repo, advances_repo, leaves_repo, executor):
    return build_services(
        workers=workers,
        departments=departments,
        attendance=attendance_repo,
        settings=settings_repo,
        advances=advances_repo,
        leaves=leaves_repo,
        job_runner=JobRunner(InMemoryJobStore(), executor),
        timezone=TZ,
    )
