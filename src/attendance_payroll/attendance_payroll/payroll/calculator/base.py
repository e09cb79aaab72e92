from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SalaryInputs:
    salary: Decimal
    working_days: int
    worked_seconds: int
    required_hours: Decimal
    current_month_deductions: Decimal
    previous_outstanding: Decimal


@dataclass(frozen=True)
class SalaryFigures:
    """Unrounded results; the report quantizes them."""

    worked_hours: Decimal
    is_present: bool
    credited_days: int
    leaves: int
    report_per_day_salary: Decimal
    total_salary: Decimal
    pending_salary: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def compute(self, inputs: SalaryInputs) -> SalaryFigures:
        raise NotImplementedError
