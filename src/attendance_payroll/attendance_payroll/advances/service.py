from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import utc_now
from ..common.validators import require_id, require_positive_amount, require_tenant
from ..core.constants import DEFAULT_ADVANCE_DESCRIPTION, DEFAULT_DEDUCTION_DESCRIPTION, MONEY_QUANTUM
from ..core.exceptions import NotFoundError, ValidationError
from ..workers.repository import WorkerRepository
from .model import Advance
from .repository import AdvanceRepository

logger = logging.getLogger(__name__)


def _insufficient(remaining: Decimal) -> ValidationError:
    return ValidationError(f"Insufficient remaining advance. Only ₹{remaining.quantize(MONEY_QUANTUM)} available.")


class AdvanceLedger:
    """Issue advances and record partial deductions against them.

    Issuing lowers the worker's ``final_salary`` by the amount; each deduction
    gives the deducted amount back.
    """

    def __init__(self, advances: AdvanceRepository, workers: WorkerRepository):
        self._advances = advances
        self._workers = workers

    def issue(
        self,
        tenant: str,
        worker_id: Optional[int],
        amount,
        description: Optional[str] = None,
        approved_by: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Advance:
        tenant = require_tenant(tenant)
        if worker_id in (None, "") or amount in (None, ""):
            raise ValidationError("Worker and amount are required")
        amount = require_positive_amount(amount)

        worker = self._workers.get_by_id(tenant, require_id(worker_id, "worker id"))
        if not worker:
            raise NotFoundError("Worker not found")

        advance = self._advances.issue(
            tenant=tenant,
            worker_id=worker.worker_id,
            amount=amount,
            description=(description or "").strip() or DEFAULT_ADVANCE_DESCRIPTION,
            approved_by=approved_by,
            created_at=now or utc_now(),
        )
        logger.info("Advance %s of %s issued to worker %s (tenant %s)", advance.advance_id, amount, worker.worker_id, tenant)
        return advance

    def deduct(
        self,
        tenant: str,
        advance_id: int,
        amount,
        description: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Advance:
        tenant = require_tenant(tenant)
        amount = require_positive_amount(amount, "Deduction amount")

        advance = self._advances.get_by_id(tenant, require_id(advance_id, "advance id"))
        if not advance:
            raise NotFoundError("Advance not found")
        if amount > advance.remaining_amount:
            raise _insufficient(advance.remaining_amount)

        updated = self._advances.record_deduction(
            tenant=tenant,
            advance_id=advance.advance_id,
            amount=amount,
            description=(description or "").strip() or DEFAULT_DEDUCTION_DESCRIPTION,
            deducted_at=now or utc_now(),
        )
        if updated is None:
            # balance moved between the read and the guarded write
            latest = self._advances.get_by_id(tenant, advance.advance_id)
            raise _insufficient(latest.remaining_amount if latest else Decimal("0"))

        logger.info("Deducted %s from advance %s (tenant %s)", amount, advance.advance_id, tenant)
        return updated

    def list_for_tenant(self, tenant: str) -> Sequence[Advance]:
        return self._advances.list_for_tenant(require_tenant(tenant))

    def list_for_worker(self, tenant: str, worker_id: int) -> Sequence[Advance]:
        tenant = require_tenant(tenant)
        worker_id = require_id(worker_id, "worker id")
        if not self._workers.get_by_id(tenant, worker_id):
            raise NotFoundError("Worker not found")
        return self._advances.list_for_worker(tenant, worker_id)
