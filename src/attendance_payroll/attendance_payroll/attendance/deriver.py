"""Rebuild per-day IN/OUT sessions from the raw attendance log.

The log carries no pairing field. For each (rfid, day) the events are sorted by
``created_at`` and folded through a two-state machine (no open session / open
session); every event ends up as exactly one tagged entry:

* ``Paired``       an OUT that closed the open IN and credited time,
* ``UnpairedIn``   an IN abandoned by a later IN, or still open at day end,
* ``AnomalousOut`` an OUT with no open IN, or not later than the open IN.

Anomalies are display flags, never errors. Only ``strict=True`` (payroll)
raises on rows that cannot be read at all.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from ..common.datetime_utils import format_duration, normalize_day_key, parse_clock_seconds
from ..core.exceptions import AttendanceDataError
from .model import AttendanceEvent

UNRESOLVED_MARK = "-"


@dataclass(frozen=True)
class PunchMark:
    time: str
    is_missed: bool = False
    unresolved: bool = False


@dataclass(frozen=True)
class Paired:
    in_event: AttendanceEvent
    out_event: AttendanceEvent
    seconds: int


@dataclass(frozen=True)
class UnpairedIn:
    event: AttendanceEvent
    left_open: bool = False


@dataclass(frozen=True)
class AnomalousOut:
    event: AttendanceEvent


DayEntry = Union[Paired, UnpairedIn, AnomalousOut]


@dataclass(frozen=True)
class DaySummary:
    tenant: str
    worker_id: int
    rfid: str
    worker_name: str
    department_name: str
    day: str
    in_times: tuple[PunchMark, ...]
    out_times: tuple[PunchMark, ...]
    total_seconds: int
    latest_activity: datetime
    entries: tuple[DayEntry, ...]

    @property
    def duration(self) -> str:
        return format_duration(self.total_seconds)

    @property
    def hours(self) -> Decimal:
        return Decimal(self.total_seconds) / Decimal(3600)

    @property
    def has_open_session(self) -> bool:
        return any(isinstance(e, UnpairedIn) and e.left_open for e in self.entries)


def _clock_key(mark: PunchMark) -> tuple[int, int]:
    if mark.unresolved:
        return (1, 0)
    try:
        return (0, parse_clock_seconds(mark.time))
    except ValueError:
        return (0, 24 * 3600)


def _read_seconds(event: AttendanceEvent, *, strict: bool) -> Optional[int]:
    try:
        return parse_clock_seconds(event.clock_time)
    except ValueError:
        if strict:
            raise AttendanceDataError(
                f"Unreadable clock time {event.clock_time!r} on attendance event {event.event_id}"
            )
        return None


def derive_day(events: Sequence[AttendanceEvent], *, strict: bool = False, day: Optional[str] = None) -> DaySummary:
    """Fold one worker-day of events into a ``DaySummary``."""
    if not events:
        raise ValueError("derive_day needs at least one event")

    ordered = sorted(events, key=lambda e: (e.created_at, e.event_id))
    first = ordered[0]

    entries: list[DayEntry] = []
    in_marks: list[PunchMark] = []
    out_marks: list[PunchMark] = []
    total = 0
    open_in: Optional[tuple[AttendanceEvent, int]] = None

    for event in ordered:
        seconds = _read_seconds(event, strict=strict)

        if event.presence:
            if seconds is None:
                in_marks.append(PunchMark(time=event.clock_time, is_missed=True))
                entries.append(UnpairedIn(event=event))
                continue
            if open_in is not None:
                entries.append(UnpairedIn(event=open_in[0]))
            open_in = (event, seconds)
            in_marks.append(PunchMark(time=event.clock_time))
            continue

        if seconds is not None and open_in is not None and seconds > open_in[1]:
            worked = seconds - open_in[1]
            total += worked
            entries.append(Paired(in_event=open_in[0], out_event=event, seconds=worked))
            out_marks.append(PunchMark(time=event.clock_time, is_missed=event.is_missed_out_punch))
            open_in = None
        else:
            # the open IN, if any, stays open
            entries.append(AnomalousOut(event=event))
            out_marks.append(PunchMark(time=event.clock_time, is_missed=True))

    in_marks.sort(key=_clock_key)
    out_marks.sort(key=_clock_key)

    if open_in is not None:
        entries.append(UnpairedIn(event=open_in[0], left_open=True))
        out_marks.append(PunchMark(time=UNRESOLVED_MARK, is_missed=True, unresolved=True))

    return DaySummary(
        tenant=first.tenant,
        worker_id=first.worker_id,
        rfid=first.rfid,
        worker_name=first.worker_name,
        department_name=first.department_name,
        day=day if day is not None else first.work_date,
        in_times=tuple(in_marks),
        out_times=tuple(out_marks),
        total_seconds=total,
        latest_activity=max(e.created_at for e in ordered),
        entries=tuple(entries),
    )


def _day_key(event: AttendanceEvent, *, strict: bool) -> str:
    key = normalize_day_key(event.work_date)
    if key is not None:
        return key
    if strict:
        raise AttendanceDataError(f"Unreadable date {event.work_date!r} on attendance event {event.event_id}")
    return str(event.work_date)


def derive_day_summaries(events: Iterable[AttendanceEvent], *, strict: bool = False) -> list[DaySummary]:
    """Group by (rfid, day), derive each group, newest activity first."""
    groups: dict[tuple[str, str], list[AttendanceEvent]] = {}
    for event in events:
        groups.setdefault((event.rfid, _day_key(event, strict=strict)), []).append(event)

    summaries = [derive_day(group, strict=strict, day=day) for (_, day), group in groups.items()]
    summaries.sort(key=lambda s: s.latest_activity, reverse=True)
    return summaries


def total_worked_seconds(summaries: Iterable[DaySummary]) -> int:
    return sum(s.total_seconds for s in summaries)


CSV_HEADERS = ("Name", "RFID", "Department", "Date", "In Times", "Out Times", "Duration")


def to_csv_rows(summaries: Iterable[DaySummary]) -> list[tuple[str, ...]]:
    rows = []
    for s in summaries:
        rows.append(
            (
                s.worker_name,
                s.rfid,
                s.department_name,
                s.day,
                " | ".join(m.time for m in s.in_times),
                " | ".join(m.time for m in s.out_times),
                s.duration,
            )
        )
    return rows
