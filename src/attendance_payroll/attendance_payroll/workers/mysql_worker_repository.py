from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Worker
from .repository import WorkerRepository

_COLUMNS = "worker_id, tenant, name, username, rfid, department_id, photo, salary, final_salary, per_day_salary"


def _row_to_worker(r: dict) -> Worker:
    return Worker(
        worker_id=int(r["worker_id"]),
        tenant=r["tenant"],
        name=r["name"],
        username=r["username"],
        rfid=r["rfid"],
        department_id=int(r["department_id"]),
        salary=to_decimal(r.get("salary")),
        final_salary=to_decimal(r.get("final_salary")),
        nominal_per_day_salary=to_decimal(r.get("per_day_salary")),
        photo=r.get("photo") or "",
    )


class MySQLWorkerRepository(WorkerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, tenant: str, worker_id: int) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE tenant=%s AND worker_id=%s", (tenant, int(worker_id)))
            r = fetchone(cur)
            return _row_to_worker(r) if r else None

    def get_by_rfid(self, tenant: str, rfid: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE tenant=%s AND rfid=%s", (tenant, rfid))
            r = fetchone(cur)
            return _row_to_worker(r) if r else None

    def find_by_rfid(self, rfid: str) -> Optional[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE rfid=%s", (rfid,))
            r = fetchone(cur)
            return _row_to_worker(r) if r else None

    def list_for_tenant(self, tenant: str) -> Sequence[Worker]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM workers WHERE tenant=%s ORDER BY worker_id", (tenant,))
            return [_row_to_worker(r) for r in fetchall(cur)]

    def adjust_final_salary(self, *, tenant: str, worker_id: int, delta: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE workers SET final_salary = final_salary + %s WHERE tenant=%s AND worker_id=%s",
                (delta, tenant, int(worker_id)),
            )
            return cur.rowcount > 0

    def update_salary(
        self,
        *,
        tenant: str,
        worker_id: int,
        salary: Decimal,
        final_salary: Decimal,
        nominal_per_day_salary: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE workers
                SET salary=%s, final_salary=%s, per_day_salary=%s
                WHERE tenant=%s AND worker_id=%s
                """,
                (salary, final_salary, nominal_per_day_salary, tenant, int(worker_id)),
            )
            return cur.rowcount > 0

    def reset_final_salaries(self, tenant: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE workers SET final_salary = salary WHERE tenant=%s", (tenant,))
            return int(cur.rowcount)
