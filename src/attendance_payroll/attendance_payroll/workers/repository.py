from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Worker


class WorkerRepository(Protocol):
    """Read access to workers plus the salary columns this core maintains.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, tenant: str, worker_id: int) -> Optional[Worker]:
        raise NotImplementedError

    def get_by_rfid(self, tenant: str, rfid: str) -> Optional[Worker]:
        raise NotImplementedError

    def find_by_rfid(self, rfid: str) -> Optional[Worker]:
        """Card readers only know the card; RFIDs are unique across tenants."""

        raise NotImplementedError

    def list_for_tenant(self, tenant: str) -> Sequence[Worker]:
        raise NotImplementedError

    def adjust_final_salary(self, *, tenant: str, worker_id: int, delta: Decimal) -> bool:
        raise NotImplementedError

    def update_salary(
        self,
        *,
        tenant: str,
        worker_id: int,
        salary: Decimal,
        final_salary: Decimal,
        nominal_per_day_salary: Decimal,
    ) -> bool:
        raise NotImplementedError

    def reset_final_salaries(self, tenant: str) -> int:
        raise NotImplementedError
