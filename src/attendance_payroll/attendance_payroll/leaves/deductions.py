from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ..core.constants import PERMISSION_WORKDAY_MINUTES
from ..core.enums import LeaveType
from ..payroll.adjustments import nominal_per_day_salary
from ..workers.model import Worker
from .model import Leave


def permission_minutes(leave: Leave) -> int:
    """Length of a Permission leave; 0 when the times are missing or reversed."""
    if not leave.start_time or not leave.end_time:
        return 0
    start = datetime.combine(leave.start_date, datetime.strptime(leave.start_time, "%H:%M").time())
    end = datetime.combine(leave.end_date, datetime.strptime(leave.end_time, "%H:%M").time())
    return max(0, int((end - start).total_seconds() // 60))


def leave_deduction(leave: Leave, worker: Worker) -> Decimal:
    """Amount an approved leave takes off the worker's final salary.

    Full-day leaves cost ``total_days`` nominal days; Permission leaves are
    pro-rated per minute of an 8-hour day.
    """
    if leave.leave_type == LeaveType.PERMISSION:
        per_day = worker.nominal_per_day_salary or nominal_per_day_salary(worker.salary)
        return Decimal(permission_minutes(leave)) * per_day / Decimal(PERMISSION_WORKDAY_MINUTES)
    return Decimal(leave.total_days) * worker.nominal_per_day_salary
