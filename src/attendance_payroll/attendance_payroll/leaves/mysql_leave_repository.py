from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_db_datetime, to_db_datetime, to_decimal
from .model import Leave
from .repository import LeaveRepository

_COLUMNS = (
    "leave_id, tenant, worker_id, leave_type, start_date, end_date, total_days, reason, status, "
    "start_time, end_time, created_at"
)


def _row_to_leave(r: dict) -> Leave:
    return Leave(
        leave_id=int(r["leave_id"]),
        tenant=r["tenant"],
        worker_id=int(r["worker_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=to_decimal(r.get("total_days")),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=from_db_datetime(r["created_at"]),
        start_time=r.get("start_time"),
        end_time=r.get("end_time"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant: str,
        worker_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: Decimal,
        reason: str,
        start_time: Optional[str],
        end_time: Optional[str],
        created_at: datetime,
    ) -> Leave:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(
                    tenant, worker_id, leave_type, start_date, end_date, total_days, reason, status,
                    start_time, end_time, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    tenant,
                    int(worker_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    total_days,
                    reason,
                    LeaveStatus.PENDING.value,
                    start_time,
                    end_time,
                    to_db_datetime(created_at),
                ),
            )
            leave_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE tenant=%s AND leave_id=%s", (tenant, leave_id))
            return _row_to_leave(fetchone(cur))

    def get_by_id(self, tenant: str, leave_id: int) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE tenant=%s AND leave_id=%s", (tenant, int(leave_id)))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_for_tenant(self, tenant: str, *, status: Optional[LeaveStatus] = None) -> Sequence[Leave]:
        where = "tenant=%s"
        params: list[object] = [tenant]
        if status is not None:
            where += " AND status=%s"
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE {where} ORDER BY created_at DESC, leave_id DESC",
                tuple(params),
            )
            return [_row_to_leave(r) for r in fetchall(cur)]

    def set_status(
        self,
        *,
        tenant: str,
        leave_id: int,
        status: LeaveStatus,
        worker_id: Optional[int] = None,
        salary_deduction: Optional[Decimal] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leaves SET status=%s WHERE tenant=%s AND leave_id=%s",
                (status.value, tenant, int(leave_id)),
            )
            if cur.rowcount == 0:
                return False

            if worker_id is not None and salary_deduction is not None:
                cur.execute(
                    """
                    UPDATE workers
                    SET final_salary = GREATEST(0, final_salary - %s)
                    WHERE tenant=%s AND worker_id=%s
                    """,
                    (salary_deduction, tenant, int(worker_id)),
                )
            return True
