from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class Worker:
    """Domain entity: a worker of one tenant.

    ``nominal_per_day_salary`` is the persisted ``salary / 30`` figure used by
    leave deductions; payroll reports compute their own per-day rate from the
    month's configured working days.
    """

    worker_id: int
    tenant: str
    name: str
    username: str
    rfid: str
    department_id: int
    salary: Decimal
    final_salary: Decimal
    nominal_per_day_salary: Decimal
    photo: str = ""
