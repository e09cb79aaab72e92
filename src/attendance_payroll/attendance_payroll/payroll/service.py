from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Sequence

from ..advances import balances
from ..advances.model import Advance
from ..advances.repository import AdvanceRepository
from ..attendance.deriver import derive_day_summaries, total_worked_seconds
from ..attendance.model import AttendanceEvent
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, month_key
from ..common.validators import require_id, require_report_period, require_tenant
from ..core.constants import DEFAULT_TIMEZONE, MONEY_QUANTUM
from ..core.exceptions import MissingConfigurationError, NotFoundError
from ..settings.model import AttendanceSettings
from ..settings.repository import SettingsRepository
from ..workers.department_repository import DepartmentRepository
from ..workers.model import Worker
from ..workers.repository import WorkerRepository
from .calculator.base import PayrollCalculator, SalaryInputs
from .calculator.standard_calculator import StandardSalaryCalculator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


def _money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SalaryReportRow:
    serial_number: int
    worker_id: int
    worker_name: str
    designation: str
    monthly_salary: Decimal
    total_days: int
    leaves: int
    working_days: int
    report_per_day_salary: Decimal
    nominal_per_day_salary: Decimal
    total_salary: Decimal
    current_month_advance: Decimal
    previous_advance: Decimal
    pending_salary: Decimal
    working_hours: Decimal
    required_hours: Decimal
    is_present: bool


@dataclass(frozen=True)
class SkippedWorker:
    worker_id: int
    worker_name: str
    reason: str


@dataclass(frozen=True)
class SalaryReport:
    tenant: str
    year: int
    month: str
    working_days: int
    rows: tuple[SalaryReportRow, ...]
    skipped: tuple[SkippedWorker, ...] = ()


@dataclass(frozen=True)
class WorkerSalarySummary:
    row: SalaryReportRow
    username: str
    rfid: str
    month: str
    total_records: int


class SalaryReportService:
    """Monthly salary report: attendance hours, presence threshold and advances.

    Money stays unrounded ``Decimal`` until a row is built, where every
    figure is quantized to 0.01 half-up.
    """

    def __init__(
        self,
        workers: WorkerRepository,
        departments: DepartmentRepository,
        attendance: AttendanceRepository,
        advances: AdvanceRepository,
        settings: SettingsRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._workers = workers
        self._departments = departments
        self._attendance = attendance
        self._advances = advances
        self._settings = settings
        self._tz = timezone
        self._calculator = calculator or StandardSalaryCalculator()

    def _require_settings(self, tenant: str) -> AttendanceSettings:
        settings = self._settings.get_for_tenant(tenant)
        if not settings:
            raise NotFoundError("Settings not found for this subdomain")
        return settings

    def _require_working_days(self, settings: AttendanceSettings, year: int, month: int) -> int:
        working_days = settings.working_days_for(year, month)
        if working_days is None:
            raise MissingConfigurationError(f"Working days are not configured for {month_key(year, month)}")
        return working_days

    def _build_row(
        self,
        *,
        serial_number: int,
        worker: Worker,
        designation: str,
        events: Sequence[AttendanceEvent],
        advances: Sequence[Advance],
        settings: AttendanceSettings,
        working_days: int,
        year: int,
        month: int,
    ) -> SalaryReportRow:
        worked_seconds = total_worked_seconds(derive_day_summaries(events, strict=True))
        required_hours = settings.required_hours_for(worker.worker_id)
        current = balances.current_month_deductions(advances, year, month, self._tz)
        previous = balances.previous_outstanding(advances, year, month, self._tz)

        figures = self._calculator.compute(
            SalaryInputs(
                salary=worker.salary,
                working_days=working_days,
                worked_seconds=worked_seconds,
                required_hours=required_hours,
                current_month_deductions=current,
                previous_outstanding=previous,
            )
        )

        return SalaryReportRow(
            serial_number=serial_number,
            worker_id=worker.worker_id,
            worker_name=worker.name,
            designation=designation,
            monthly_salary=_money(worker.salary),
            total_days=working_days,
            leaves=figures.leaves,
            working_days=figures.credited_days,
            report_per_day_salary=_money(figures.report_per_day_salary),
            nominal_per_day_salary=_money(worker.nominal_per_day_salary),
            total_salary=_money(figures.total_salary),
            current_month_advance=_money(current),
            previous_advance=_money(previous),
            pending_salary=_money(figures.pending_salary),
            working_hours=_money(figures.worked_hours),
            required_hours=required_hours,
            is_present=figures.is_present,
        )

    def generate(
        self,
        tenant: str,
        year,
        month,
        *,
        progress: Optional[ProgressCallback] = None,
    ) -> SalaryReport:
        tenant = require_tenant(tenant)
        year, month = require_report_period(year, month)

        settings = self._require_settings(tenant)
        workers = list(self._workers.list_for_tenant(tenant))
        if not workers:
            raise NotFoundError("No workers found for this subdomain")
        working_days = self._require_working_days(settings, year, month)

        departments = {d.department_id: d.name for d in self._departments.list_for_tenant(tenant)}

        start, end = month_bounds(year, month)
        events_by_worker: dict[int, list[AttendanceEvent]] = {}
        for event in self._attendance.list_range(tenant=tenant, start=start, end=end):
            events_by_worker.setdefault(event.worker_id, []).append(event)

        advances_by_worker: dict[int, list[Advance]] = {}
        for advance in self._advances.list_for_tenant(tenant):
            advances_by_worker.setdefault(advance.worker_id, []).append(advance)

        rows: list[SalaryReportRow] = []
        skipped: list[SkippedWorker] = []

        for index, worker in enumerate(workers, start=1):
            try:
                rows.append(
                    self._build_row(
                        serial_number=len(rows) + 1,
                        worker=worker,
                        designation=departments.get(worker.department_id, "N/A"),
                        events=events_by_worker.get(worker.worker_id, []),
                        advances=advances_by_worker.get(worker.worker_id, []),
                        settings=settings,
                        working_days=working_days,
                        year=year,
                        month=month,
                    )
                )
            except Exception as exc:
                logger.warning(
                    "Salary report %s %s: skipping worker %s: %s",
                    tenant,
                    month_key(year, month),
                    worker.worker_id,
                    exc,
                )
                skipped.append(SkippedWorker(worker_id=worker.worker_id, worker_name=worker.name, reason=str(exc)))

            if progress is not None:
                progress(int(index * 100 / len(workers)))

        logger.info(
            "Salary report %s %s: %d rows, %d skipped",
            tenant,
            month_key(year, month),
            len(rows),
            len(skipped),
        )
        return SalaryReport(
            tenant=tenant,
            year=year,
            month=month_key(year, month),
            working_days=working_days,
            rows=tuple(rows),
            skipped=tuple(skipped),
        )

    def worker_summary(self, tenant: str, year, month, worker_id) -> WorkerSalarySummary:
        tenant = require_tenant(tenant)
        year, month = require_report_period(year, month)

        worker = self._workers.get_by_id(tenant, require_id(worker_id, "worker id"))
        if not worker:
            raise NotFoundError("Worker not found")

        settings = self._require_settings(tenant)
        working_days = self._require_working_days(settings, year, month)

        department = self._departments.get_by_id(tenant, worker.department_id)

        start, end = month_bounds(year, month)
        events = self._attendance.list_range(tenant=tenant, start=start, end=end, worker_id=worker.worker_id)
        advances = self._advances.list_for_worker(tenant, worker.worker_id)

        row = self._build_row(
            serial_number=1,
            worker=worker,
            designation=department.name if department else "N/A",
            events=events,
            advances=advances,
            settings=settings,
            working_days=working_days,
            year=year,
            month=month,
        )
        return WorkerSalarySummary(
            row=row,
            username=worker.username,
            rfid=worker.rfid,
            month=month_key(year, month),
            total_records=len(events),
        )
