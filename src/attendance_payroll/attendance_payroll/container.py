from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import time

from .advances.mysql_advance_repository import MySQLAdvanceRepository
from .advances.service import AdvanceLedger
from .attendance.auto_closer import DailyAutoCloser
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import AUTO_CLOSE_TIME, DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .jobs.service import JobRunner
from .jobs.store import InMemoryJobStore
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .payroll.adjustments import SalaryAdjustmentService
from .payroll.service import SalaryReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import SettingsService
from .workers.mysql_department_repository import MySQLDepartmentRepository
from .workers.mysql_worker_repository import MySQLWorkerRepository


@dataclass(frozen=True)
class Container:
    timezone: str

    attendance_service: AttendanceService
    auto_closer: DailyAutoCloser
    settings_service: SettingsService
    salary_report_service: SalaryReportService
    salary_adjustment_service: SalaryAdjustmentService
    advance_ledger: AdvanceLedger
    leave_service: LeaveService
    job_runner: JobRunner


def build_services(
    *,
    workers,
    departments,
    attendance,
    settings,
    advances,
    leaves,
    job_runner: JobRunner,
    timezone: str = DEFAULT_TIMEZONE,
    auto_close_time: time = AUTO_CLOSE_TIME,
) -> Container:
    """Wire services over any repository implementations."""
    return Container(
        timezone=timezone,
        attendance_service=AttendanceService(attendance, workers, departments, settings, timezone=timezone),
        auto_closer=DailyAutoCloser(
            attendance,
            workers,
            departments,
            timezone=timezone,
            close_time=auto_close_time,
        ),
        settings_service=SettingsService(settings),
        salary_report_service=SalaryReportService(
            workers,
            departments,
            attendance,
            advances,
            settings,
            timezone=timezone,
        ),
        salary_adjustment_service=SalaryAdjustmentService(workers),
        advance_ledger=AdvanceLedger(advances, workers),
        leave_service=LeaveService(leaves, workers),
        job_runner=job_runner,
    )


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    auto_close_time: time = AUTO_CLOSE_TIME,
    report_job_workers: int = 2,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return build_services(
        workers=MySQLWorkerRepository(conn),
        departments=MySQLDepartmentRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        settings=MySQLSettingsRepository(conn),
        advances=MySQLAdvanceRepository(conn),
        leaves=MySQLLeaveRepository(conn),
        job_runner=JobRunner(
            InMemoryJobStore(),
            ThreadPoolExecutor(max_workers=int(report_job_workers), thread_name_prefix="report-job"),
        ),
        timezone=timezone,
        auto_close_time=auto_close_time,
    )
