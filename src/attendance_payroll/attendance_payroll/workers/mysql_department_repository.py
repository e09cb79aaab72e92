from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .department_model import Department
from .department_repository import DepartmentRepository


def _row_to_department(r: dict) -> Department:
    return Department(department_id=int(r["department_id"]), tenant=r["tenant"], name=r["name"])


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, tenant: str, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT department_id, tenant, name FROM departments WHERE tenant=%s AND department_id=%s",
                (tenant, int(department_id)),
            )
            r = fetchone(cur)
            return _row_to_department(r) if r else None

    def list_for_tenant(self, tenant: str) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, tenant, name FROM departments WHERE tenant=%s ORDER BY name", (tenant,))
            return [_row_to_department(r) for r in fetchall(cur)]
