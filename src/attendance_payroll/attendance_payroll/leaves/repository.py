from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import Leave


class LeaveRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, tenant: str, leave_id: int) -> Optional[Leave]:
        raise NotImplementedError

    def list_for_tenant(self, tenant: str, *, status: Optional[LeaveStatus] = None) -> Sequence[Leave]:
        raise NotImplementedError

    def set_status(
        self,
        *,
        tenant: str,
        leave_id: int,
        status: LeaveStatus,
        worker_id: Optional[int] = None,
        salary_deduction: Optional[Decimal] = None,
    ) -> bool:
        """Update the status and, when given, lower the worker's final salary
        (never below zero) in the same transaction."""

        raise NotImplementedError
