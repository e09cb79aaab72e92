from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional

from ..workers.department_model import Department
from ..workers.model import Worker


@dataclass(frozen=True)
class EventDraft:
    """An attendance event about to be appended to the log.

    ``work_date`` (tenant-local ``YYYY-MM-DD``) and ``clock_time`` (12-hour
    wall clock) are display keys; ``created_at`` (UTC) orders events.
    Worker/department names are copied at write time.
    """

    tenant: str
    worker_id: int
    rfid: str
    worker_name: str
    username: str
    department_id: int
    department_name: str
    work_date: str
    clock_time: str
    presence: bool
    created_at: datetime
    is_missed_out_punch: bool = False

    @classmethod
    def for_worker(
        cls,
        worker: Worker,
        department: Department,
        *,
        work_date: str,
        clock_time: str,
        presence: bool,
        created_at: datetime,
        is_missed_out_punch: bool = False,
    ) -> "EventDraft":
        return cls(
            tenant=worker.tenant,
            worker_id=worker.worker_id,
            rfid=worker.rfid,
            worker_name=worker.name,
            username=worker.username,
            department_id=department.department_id,
            department_name=department.name,
            work_date=work_date,
            clock_time=clock_time,
            presence=presence,
            created_at=created_at,
            is_missed_out_punch=is_missed_out_punch,
        )

    def persisted(self, event_id: int) -> "AttendanceEvent":
        return AttendanceEvent(event_id=int(event_id), **asdict(self))


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one punch in the append-only attendance log.

    ``presence`` is True for a punch-in, False for a punch-out.
    """

    event_id: int
    tenant: str
    worker_id: int
    rfid: str
    worker_name: str
    username: str
    department_id: int
    department_name: str
    work_date: str
    clock_time: str
    presence: bool
    created_at: datetime
    is_missed_out_punch: bool = False


@dataclass(frozen=True)
class PunchRequest:
    """Punch intake: presence is optional, coordinates only needed with a geofence."""

    tenant: str
    rfid: str
    presence: Optional[bool] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
