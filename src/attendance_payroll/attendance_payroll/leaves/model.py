from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    """A leave request. ``start_time``/``end_time`` (``HH:MM``) only for Permission leaves."""

    leave_id: int
    tenant: str
    worker_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: Decimal
    reason: str
    status: LeaveStatus
    created_at: datetime
    start_time: Optional[str] = None
    end_time: Optional[str] = None
