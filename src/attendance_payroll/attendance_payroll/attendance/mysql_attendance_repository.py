from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime
from .model import AttendanceEvent, EventDraft
from .repository import AttendanceRepository

_COLUMNS = (
    "event_id, tenant, worker_id, rfid, worker_name, username, department_id, department_name, "
    "work_date, clock_time, presence, is_missed_out_punch, created_at"
)


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        tenant=r["tenant"],
        worker_id=int(r["worker_id"]),
        rfid=r["rfid"],
        worker_name=r["worker_name"],
        username=r.get("username") or "",
        department_id=int(r["department_id"]),
        department_name=r["department_name"],
        work_date=str(r["work_date"]),
        clock_time=r["clock_time"],
        presence=bool(r["presence"]),
        created_at=from_db_datetime(r["created_at"]),
        is_missed_out_punch=bool(r.get("is_missed_out_punch")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_event(self, draft: EventDraft) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(
                    tenant, worker_id, rfid, worker_name, username, department_id, department_name,
                    work_date, clock_time, presence, is_missed_out_punch, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    draft.tenant,
                    draft.worker_id,
                    draft.rfid,
                    draft.worker_name,
                    draft.username,
                    draft.department_id,
                    draft.department_name,
                    draft.work_date,
                    draft.clock_time,
                    int(draft.presence),
                    int(draft.is_missed_out_punch),
                    to_db_datetime(draft.created_at),
                ),
            )
            return draft.persisted(int(cur.lastrowid))

    def get_last_for_worker(self, *, tenant: str, rfid: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE tenant=%s AND rfid=%s
                ORDER BY created_at DESC, event_id DESC
                LIMIT 1
                """,
                (tenant, rfid),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def list_range(
        self,
        *,
        tenant: str,
        start: date,
        end: date,
        worker_id: Optional[int] = None,
    ) -> Sequence[AttendanceEvent]:
        clauses = ["tenant=%s", "work_date >= %s", "work_date < %s"]
        params: list[object] = [tenant, start.isoformat(), end.isoformat()]

        if worker_id is not None:
            clauses.append("worker_id=%s")
            params.append(int(worker_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE {where}
                ORDER BY created_at ASC, event_id ASC
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_for_worker(self, *, tenant: str, rfid: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE tenant=%s AND rfid=%s
                ORDER BY created_at ASC, event_id ASC
                """,
                (tenant, rfid),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_tenants_for_day(self, work_date: str) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT DISTINCT tenant FROM attendance_events WHERE work_date=%s ORDER BY tenant",
                (work_date,),
            )
            return [r["tenant"] for r in fetchall(cur)]

    def list_latest_per_worker(self, *, tenant: str, work_date: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM (
                    SELECT e.*,
                           ROW_NUMBER() OVER (
                               PARTITION BY e.rfid ORDER BY e.created_at DESC, e.event_id DESC
                           ) AS rn
                    FROM attendance_events e
                    WHERE e.tenant=%s AND e.work_date=%s
                ) latest
                WHERE latest.rn = 1
                ORDER BY rfid
                """,
                (tenant, work_date),
            )
            return [_row_to_event(r) for r in fetchall(cur)]
