from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, EventDraft


class AttendanceRepository(Protocol):
    """Append-only attendance log. There is no update or delete."""

    def create_event(self, draft: EventDraft) -> AttendanceEvent:
        raise NotImplementedError

    def get_last_for_worker(self, *, tenant: str, rfid: str) -> Optional[AttendanceEvent]:
        """Most recent event by ``created_at``."""

        raise NotImplementedError

    def list_range(
        self,
        *,
        tenant: str,
        start: date,
        end: date,
        worker_id: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        """Events whose ``work_date`` is in [start, end)."""

        raise NotImplementedError

    def list_for_worker(self, *, tenant: str, rfid: str) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def list_tenants_for_day(self, work_date: str) -> Sequence[str]:
        raise NotImplementedError

    def list_latest_per_worker(self, *, tenant: str, work_date: str) -> Sequence[AttendanceEvent]:
        """For each RFID with events on ``work_date``, its latest event of that day."""

        raise NotImplementedError
