from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import (
    db_cursor,
    fetchall,
    fetchone,
    from_db_datetime,
    in_clause,
    to_db_datetime,
    to_decimal,
)
from .model import Advance, AdvanceDeduction
from .repository import AdvanceRepository

_COLUMNS = "advance_id, tenant, worker_id, amount, remaining_amount, description, approved_by, created_at"


def _row_to_deduction(r: dict) -> AdvanceDeduction:
    return AdvanceDeduction(
        deduction_id=int(r["deduction_id"]),
        advance_id=int(r["advance_id"]),
        amount=to_decimal(r["amount"]),
        description=r.get("description") or "",
        deducted_at=from_db_datetime(r["deducted_at"]),
    )


def _row_to_advance(r: dict, deductions: tuple[AdvanceDeduction, ...]) -> Advance:
    return Advance(
        advance_id=int(r["advance_id"]),
        tenant=r["tenant"],
        worker_id=int(r["worker_id"]),
        amount=to_decimal(r["amount"]),
        remaining_amount=to_decimal(r["remaining_amount"]),
        description=r.get("description") or "",
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        created_at=from_db_datetime(r["created_at"]),
        deductions=deductions,
    )


def _attach_deductions(cur, tenant: str, rows: list[dict]) -> list[Advance]:
    if not rows:
        return []

    ids = [int(r["advance_id"]) for r in rows]
    cur.execute(
        f"""
        SELECT deduction_id, advance_id, amount, description, deducted_at
        FROM advance_deductions
        WHERE tenant=%s AND advance_id IN ({in_clause(ids)})
        ORDER BY deducted_at ASC, deduction_id ASC
        """,
        (tenant, *ids),
    )

    by_advance: dict[int, list[AdvanceDeduction]] = {}
    for d in fetchall(cur):
        deduction = _row_to_deduction(d)
        by_advance.setdefault(deduction.advance_id, []).append(deduction)

    return [_row_to_advance(r, tuple(by_advance.get(int(r["advance_id"]), ()))) for r in rows]


def _load(cur, tenant: str, advance_id: int) -> Optional[Advance]:
    cur.execute(f"SELECT {_COLUMNS} FROM advances WHERE tenant=%s AND advance_id=%s", (tenant, int(advance_id)))
    r = fetchone(cur)
    if not r:
        return None
    return _attach_deductions(cur, tenant, [r])[0]


class MySQLAdvanceRepository(AdvanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, tenant: str, advance_id: int) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _load(cur, tenant, advance_id)

    def list_for_tenant(self, tenant: str) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM advances WHERE tenant=%s ORDER BY created_at DESC, advance_id DESC",
                (tenant,),
            )
            return _attach_deductions(cur, tenant, fetchall(cur))

    def list_for_worker(self, tenant: str, worker_id: int) -> Sequence[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM advances
                WHERE tenant=%s AND worker_id=%s
                ORDER BY created_at DESC, advance_id DESC
                """,
                (tenant, int(worker_id)),
            )
            return _attach_deductions(cur, tenant, fetchall(cur))

    def issue(
        self,
        *,
        tenant: str,
        worker_id: int,
        amount: Decimal,
        description: str,
        approved_by: Optional[int],
        created_at: datetime,
    ) -> Advance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO advances(tenant, worker_id, amount, remaining_amount, description, approved_by, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (tenant, int(worker_id), amount, amount, description, approved_by, to_db_datetime(created_at)),
            )
            advance_id = int(cur.lastrowid)
            cur.execute(
                "UPDATE workers SET final_salary = final_salary - %s WHERE tenant=%s AND worker_id=%s",
                (amount, tenant, int(worker_id)),
            )
            return _load(cur, tenant, advance_id)

    def record_deduction(
        self,
        *,
        tenant: str,
        advance_id: int,
        amount: Decimal,
        description: str,
        deducted_at: datetime,
    ) -> Optional[Advance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT worker_id FROM advances WHERE tenant=%s AND advance_id=%s FOR UPDATE",
                (tenant, int(advance_id)),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                """
                UPDATE advances
                SET remaining_amount = remaining_amount - %s
                WHERE tenant=%s AND advance_id=%s AND remaining_amount >= %s
                """,
                (amount, tenant, int(advance_id), amount),
            )
            if cur.rowcount == 0:
                return None

            cur.execute(
                """
                INSERT INTO advance_deductions(advance_id, tenant, amount, description, deducted_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(advance_id), tenant, amount, description, to_db_datetime(deducted_at)),
            )
            cur.execute(
                "UPDATE workers SET final_salary = final_salary + %s WHERE tenant=%s AND worker_id=%s",
                (amount, tenant, int(r["worker_id"])),
            )
            return _load(cur, tenant, advance_id)
