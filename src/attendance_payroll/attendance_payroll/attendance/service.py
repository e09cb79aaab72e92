from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import format_clock, local_clock, local_day_key, utc_now
from ..common.validators import require_non_empty, require_tenant
from ..core.constants import DEFAULT_TIMEZONE, MISSED_PUNCH_CLOSE_TIME
from ..core.exceptions import LocationDeniedError, NotFoundError, ValidationError
from ..settings.repository import SettingsRepository
from ..workers.department_model import Department
from ..workers.department_repository import DepartmentRepository
from ..workers.model import Worker
from ..workers.repository import WorkerRepository
from .deriver import DaySummary, derive_day_summaries
from .geofence import GeofenceDecision, evaluate_geofence
from .model import AttendanceEvent, EventDraft, PunchRequest
from .repository import AttendanceRepository
from .resolver import resolve_transition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PunchOutcome:
    event: AttendanceEvent
    geofence: GeofenceDecision
    correction: Optional[AttendanceEvent] = None

    @property
    def message(self) -> str:
        return "Punch In recorded" if self.event.presence else "Punch Out recorded"


@dataclass(frozen=True)
class NextPunch:
    presence: bool
    last_event: Optional[AttendanceEvent]

    @property
    def message(self) -> str:
        if self.last_event is None:
            return "No previous attendance record found. Next action will be Punch In."
        return "Next action will be Punch In" if self.presence else "Next action will be Punch Out"


class AttendanceService:
    """Punch intake and attendance report queries.

    A punch either writes everything it needs (optional correction OUT, then
    the live event) or nothing: every lookup and the geofence check run before
    the first write.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        workers: WorkerRepository,
        departments: DepartmentRepository,
        settings: SettingsRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        missed_punch_close_time: time = MISSED_PUNCH_CLOSE_TIME,
    ):
        self._attendance = attendance
        self._workers = workers
        self._departments = departments
        self._settings = settings
        self._tz = timezone
        self._missed_punch_close_time = missed_punch_close_time

    def _get_department(self, worker: Worker) -> Department:
        department = self._departments.get_by_id(worker.tenant, worker.department_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def _check_location(self, tenant: str, latitude, longitude) -> GeofenceDecision:
        settings = self._settings.get_for_tenant(tenant)
        location = settings.attendance_location if settings else None
        decision = evaluate_geofence(location, latitude, longitude)
        if not decision.allowed:
            logger.warning("Punch refused for tenant %s: %s", tenant, decision.message)
            raise LocationDeniedError(decision.message, reason=decision.reason, distance_m=decision.distance_m)
        return decision

    def _punch(self, worker: Worker, presence, latitude, longitude, now: Optional[datetime]) -> PunchOutcome:
        department = self._get_department(worker)
        geofence = self._check_location(worker.tenant, latitude, longitude)

        now = now or utc_now()
        today = local_day_key(now, self._tz)

        last = self._attendance.get_last_for_worker(tenant=worker.tenant, rfid=worker.rfid)
        decision = resolve_transition(last, today, presence)

        correction = None
        if decision.needs_correction:
            correction = self._attendance.create_event(
                EventDraft.for_worker(
                    worker,
                    department,
                    work_date=decision.carry_over_day,
                    clock_time=format_clock(self._missed_punch_close_time),
                    presence=False,
                    created_at=now,
                    is_missed_out_punch=True,
                )
            )
            logger.info(
                "Closed open punch of %s (tenant %s) left on %s",
                worker.rfid,
                worker.tenant,
                decision.carry_over_day,
            )

        event = self._attendance.create_event(
            EventDraft.for_worker(
                worker,
                department,
                work_date=today,
                clock_time=local_clock(now, self._tz),
                presence=decision.presence,
                created_at=now,
            )
        )
        return PunchOutcome(event=event, geofence=geofence, correction=correction)

    def record_punch(self, request: PunchRequest, *, now: Optional[datetime] = None) -> PunchOutcome:
        tenant = require_tenant(request.tenant)
        rfid = require_non_empty(request.rfid, "RFID")

        worker = self._workers.get_by_rfid(tenant, rfid)
        if not worker:
            raise NotFoundError("Worker not found")

        return self._punch(worker, request.presence, request.latitude, request.longitude, now)

    def record_card_punch(
        self,
        rfid: str,
        presence: Optional[bool] = None,
        latitude=None,
        longitude=None,
        *,
        now: Optional[datetime] = None,
    ) -> PunchOutcome:
        """Punch from a card reader that only knows the card."""
        rfid = require_non_empty(rfid, "RFID")

        worker = self._workers.find_by_rfid(rfid)
        if not worker:
            raise NotFoundError("Worker not found")

        return self._punch(worker, presence, latitude, longitude, now)

    def next_presence(self, tenant: str, rfid: str, *, now: Optional[datetime] = None) -> NextPunch:
        tenant = require_tenant(tenant)
        rfid = require_non_empty(rfid, "RFID")

        last = self._attendance.get_last_for_worker(tenant=tenant, rfid=rfid)
        today = local_day_key(now or utc_now(), self._tz)
        return NextPunch(presence=resolve_transition(last, today).presence, last_event=last)

    def day_summaries(
        self,
        tenant: str,
        start: date,
        end: date,
        worker_id: Optional[int] = None,
    ) -> list[DaySummary]:
        """Per-day summaries for ``start``..``end`` inclusive."""
        tenant = require_tenant(tenant)
        if end < start:
            raise ValidationError("End date must not be before start date")

        events = self._attendance.list_range(
            tenant=tenant,
            start=start,
            end=end + timedelta(days=1),
            worker_id=worker_id,
        )
        return derive_day_summaries(events)

    def worker_day_summaries(
        self,
        tenant: str,
        rfid: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[DaySummary]:
        tenant = require_tenant(tenant)
        rfid = require_non_empty(rfid, "RFID")

        worker = self._workers.get_by_rfid(tenant, rfid)
        if not worker:
            raise NotFoundError("Worker not found")

        if start is not None and end is not None:
            return self.day_summaries(tenant, start, end, worker_id=worker.worker_id)

        events = self._attendance.list_for_worker(tenant=tenant, rfid=rfid)
        return derive_day_summaries(events)
