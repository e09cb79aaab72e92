from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class AdvanceDeduction:
    deduction_id: int
    advance_id: int
    amount: Decimal
    description: str
    deducted_at: datetime


@dataclass(frozen=True)
class Advance:
    """Cash advance paid to a worker and recovered by partial deductions.

    ``remaining_amount`` always equals ``amount`` minus the sum of
    ``deductions``; deductions are append-only.
    """

    advance_id: int
    tenant: str
    worker_id: int
    amount: Decimal
    remaining_amount: Decimal
    description: str
    created_at: datetime
    approved_by: Optional[int] = None
    deductions: tuple[AdvanceDeduction, ...] = ()

    @property
    def deducted_total(self) -> Decimal:
        return sum((d.amount for d in self.deductions), Decimal("0"))
