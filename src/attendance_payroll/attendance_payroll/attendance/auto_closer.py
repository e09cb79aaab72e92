from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import format_clock, local_day_key, utc_now
from ..core.constants import AUTO_CLOSE_TIME, DEFAULT_TIMEZONE
from ..core.exceptions import NotFoundError
from ..workers.department_repository import DepartmentRepository
from ..workers.repository import WorkerRepository
from .model import AttendanceEvent, EventDraft
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoCloseFailure:
    """``rfid`` is None when the tenant's events could not be listed."""

    tenant: str
    rfid: Optional[str]
    reason: str


@dataclass
class AutoCloseReport:
    day: str
    inspected: int = 0
    closed: list[AttendanceEvent] = field(default_factory=list)
    failed: list[AutoCloseFailure] = field(default_factory=list)


class DailyAutoCloser:
    """End-of-day sweep closing every session still open today.

    Running it twice is harmless: once closed, a worker's latest event is an
    OUT and is skipped.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        departments: DepartmentRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        close_time: time = AUTO_CLOSE_TIME,
    ):
        self._attendance = attendance
        self._workers = workers
        self._departments = departments
        self._tz = timezone
        self._close_time = close_time

    def _close(self, latest: AttendanceEvent, now: datetime) -> AttendanceEvent:
        worker = self._workers.get_by_rfid(latest.tenant, latest.rfid)
        if not worker:
            raise NotFoundError(f"Worker not found for RFID {latest.rfid}")
        department = self._departments.get_by_id(worker.tenant, worker.department_id)
        if not department:
            raise NotFoundError(f"Department not found for worker {worker.worker_id}")

        return self._attendance.create_event(
            EventDraft.for_worker(
                worker,
                department,
                work_date=latest.work_date,
                clock_time=format_clock(self._close_time),
                presence=False,
                created_at=now,
                is_missed_out_punch=True,
            )
        )

    def run(self, now: Optional[datetime] = None) -> AutoCloseReport:
        now = now or utc_now()
        report = AutoCloseReport(day=local_day_key(now, self._tz))

        for tenant in self._attendance.list_tenants_for_day(report.day):
            try:
                latest_events = self._attendance.list_latest_per_worker(tenant=tenant, work_date=report.day)
            except Exception as exc:
                logger.exception("Auto-close could not list events of tenant %s", tenant)
                report.failed.append(AutoCloseFailure(tenant=tenant, rfid=None, reason=str(exc)))
                continue

            for latest in latest_events:
                report.inspected += 1
                if not latest.presence:
                    continue
                try:
                    report.closed.append(self._close(latest, now))
                except Exception as exc:
                    logger.exception("Auto-close failed for %s (tenant %s)", latest.rfid, tenant)
                    report.failed.append(AutoCloseFailure(tenant=tenant, rfid=latest.rfid, reason=str(exc)))

        logger.info(
            "Auto-close for %s: %d inspected, %d closed, %d failed",
            report.day,
            report.inspected,
            len(report.closed),
            len(report.failed),
        )
        return report
