from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import month_key
from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS, DEFAULT_REQUIRED_HOURS


@dataclass(frozen=True)
class WorkerTimer:
    worker_id: int
    hours: Decimal


@dataclass(frozen=True)
class AttendanceTimer:
    """Required hours: a global value, optionally overridden per worker."""

    global_hours: Decimal = DEFAULT_REQUIRED_HOURS
    apply_to_all_workers: bool = True
    specific_workers: tuple[WorkerTimer, ...] = ()

    def hours_for(self, worker_id: int) -> Decimal:
        if self.apply_to_all_workers:
            return self.global_hours
        for timer in self.specific_workers:
            if timer.worker_id == worker_id:
                return timer.hours
        return self.global_hours


@dataclass(frozen=True)
class MonthlyWorkingDays:
    month: str  # YYYY-MM
    working_days: int


@dataclass(frozen=True)
class AttendanceLocation:
    enabled: bool = False
    latitude: float = 0.0
    longitude: float = 0.0
    radius: float = float(DEFAULT_GEOFENCE_RADIUS_METERS)
    locked: bool = False


@dataclass(frozen=True)
class AttendanceSettings:
    """Per-tenant settings read by attendance and payroll."""

    tenant: str
    attendance_timer: AttendanceTimer = field(default_factory=AttendanceTimer)
    monthly_working_days: tuple[MonthlyWorkingDays, ...] = ()
    attendance_location: AttendanceLocation = field(default_factory=AttendanceLocation)
    email_reports_enabled: bool = False
    email_sent_today: bool = False
    last_email_sent: Optional[datetime] = None

    def working_days_for(self, year: int, month: int) -> Optional[int]:
        """None when the month was never configured (0 is a valid setting)."""
        key = month_key(year, month)
        for entry in self.monthly_working_days:
            if entry.month == key:
                return int(entry.working_days)
        return None

    def required_hours_for(self, worker_id: int) -> Decimal:
        return self.attendance_timer.hours_for(worker_id)
