from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from .model import Advance


class AdvanceRepository(Protocol):
    """Advances and their deductions.

    ``issue`` and ``record_deduction`` also move the worker's ``final_salary``
    and must do both writes in one transaction.
    """

    def get_by_id(self, tenant: str, advance_id: int) -> Optional[Advance]:
        raise NotImplementedError

    def list_for_tenant(self, tenant: str) -> Sequence[Advance]:
        raise NotImplementedError

    def list_for_worker(self, tenant: str, worker_id: int) -> Sequence[Advance]:
        raise NotImplementedError

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
        raise NotImplementedError

    def record_deduction(
        self,
        *,
        tenant: str,
        advance_id: int,
        amount: Decimal,
        description: str,
        deducted_at: datetime,
    ) -> Optional[Advance]:
        """Returns None, writing nothing, when ``amount`` exceeds the remaining balance."""

        raise NotImplementedError
