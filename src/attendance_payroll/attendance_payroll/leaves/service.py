from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, utc_now
from ..common.validators import require_id, require_tenant
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import NotFoundError, ValidationError
from ..workers.repository import WorkerRepository
from .deductions import leave_deduction
from .model import Leave
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, workers: WorkerRepository):
        self._leaves = leaves
        self._workers = workers

    @staticmethod
    def _parse_date(value) -> date:
        try:
            return parse_iso_date(str(value).strip()[:10])
        except ValueError:
            raise ValidationError("Invalid date (YYYY-MM-DD)")

    @staticmethod
    def _parse_time(value) -> str:
        v = (value or "").strip()
        try:
            return datetime.strptime(v, "%H:%M").strftime("%H:%M")
        except ValueError:
            raise ValidationError("Invalid time (HH:MM)")

    @staticmethod
    def _parse_total_days(value) -> Decimal:
        if value in (None, ""):
            return Decimal("0")
        try:
            days = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise ValidationError("Total days must be a number")
        if not days.is_finite() or days < 0:
            raise ValidationError("Total days must be a number")
        return days

    def apply(
        self,
        tenant: str,
        worker_id,
        leave_type,
        start_date,
        end_date,
        reason: str,
        total_days=None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> Leave:
        tenant = require_tenant(tenant)
        if not leave_type or not start_date or not end_date or not (reason or "").strip():
            raise ValidationError("Please add all required fields")

        try:
            kind = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Invalid leave type")

        start = self._parse_date(start_date)
        end = self._parse_date(end_date)
        if end < start:
            raise ValidationError("End date must not be before start date")

        if kind == LeaveType.PERMISSION:
            if not start_time or not end_time:
                raise ValidationError("Start and end time are required for Permission leave")
            start_time = self._parse_time(start_time)
            end_time = self._parse_time(end_time)
        else:
            start_time = end_time = None

        worker = self._workers.get_by_id(tenant, require_id(worker_id, "worker id"))
        if not worker:
            raise NotFoundError("Worker not found")

        return self._leaves.create(
            tenant=tenant,
            worker_id=worker.worker_id,
            leave_type=kind,
            start_date=start,
            end_date=end,
            total_days=self._parse_total_days(total_days),
            reason=reason.strip(),
            start_time=start_time,
            end_time=end_time,
            created_at=now or utc_now(),
        )

    def decide(self, tenant: str, leave_id, status) -> Leave:
        """Set the leave status; entering Approved charges the worker once."""
        tenant = require_tenant(tenant)
        try:
            new_status = LeaveStatus(status)
        except ValueError:
            raise ValidationError("Invalid status")

        leave = self._leaves.get_by_id(tenant, require_id(leave_id, "leave id"))
        if not leave:
            raise NotFoundError("Leave not found")

        worker_id = None
        deduction = None
        if new_status == LeaveStatus.APPROVED and leave.status != LeaveStatus.APPROVED:
            worker = self._workers.get_by_id(tenant, leave.worker_id)
            if worker:
                worker_id = worker.worker_id
                deduction = leave_deduction(leave, worker)
            else:
                logger.warning("Leave %s approved but worker %s is gone (tenant %s)", leave.leave_id, leave.worker_id, tenant)

        if not self._leaves.set_status(
            tenant=tenant,
            leave_id=leave.leave_id,
            status=new_status,
            worker_id=worker_id,
            salary_deduction=deduction,
        ):
            raise NotFoundError("Leave not found")

        if deduction is not None:
            logger.info("Leave %s approved: %s deducted from worker %s (tenant %s)", leave.leave_id, deduction, worker_id, tenant)

        return self._leaves.get_by_id(tenant, leave.leave_id)

    def list_for_tenant(self, tenant: str, status: Optional[str] = None) -> Sequence[Leave]:
        tenant = require_tenant(tenant)
        wanted = None
        if status and status != "all":
            try:
                wanted = LeaveStatus(status)
            except ValueError:
                raise ValidationError("Invalid status")
        return self._leaves.list_for_tenant(tenant, status=wanted)
