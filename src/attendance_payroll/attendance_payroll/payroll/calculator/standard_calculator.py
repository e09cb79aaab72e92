from __future__ import annotations

from decimal import Decimal

from .base import PayrollCalculator, SalaryFigures, SalaryInputs

_ZERO = Decimal("0")


class StandardSalaryCalculator(PayrollCalculator):
    """Monthly rule: the whole month is paid when worked hours reach the
    required hours, otherwise nothing; advances are then subtracted.

    The pending figure is allowed to go negative.
    """

    def compute(self, inputs: SalaryInputs) -> SalaryFigures:
        worked_hours = Decimal(int(inputs.worked_seconds)) / Decimal(3600)
        is_present = worked_hours >= inputs.required_hours

        working_days = int(inputs.working_days)
        credited_days = working_days if is_present else 0

        if inputs.salary > 0 and working_days > 0:
            per_day = inputs.salary / Decimal(working_days)
        else:
            per_day = _ZERO

        total = per_day * credited_days
        pending = total - inputs.current_month_deductions - inputs.previous_outstanding

        return SalaryFigures(
            worked_hours=worked_hours,
            is_present=is_present,
            credited_days=credited_days,
            leaves=0 if is_present else working_days,
            report_per_day_salary=per_day,
            total_salary=total,
            pending_salary=pending,
        )
