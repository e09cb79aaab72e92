"""Advance figures a monthly salary report subtracts.

Deduction and creation instants are compared in the tenant clock, so a
deduction made at 01:00 local on the 1st belongs to the new month.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from ..common.datetime_utils import local_month
from .model import Advance

_ZERO = Decimal("0")


def current_month_deductions(advances: Iterable[Advance], year: int, month: int, tz: str) -> Decimal:
    """Sum of every deduction dated within (year, month)."""
    total = _ZERO
    for advance in advances:
        for deduction in advance.deductions:
            if local_month(deduction.deducted_at, tz) == (year, month):
                total += deduction.amount
    return total


def previous_outstanding(advances: Iterable[Advance], year: int, month: int, tz: str) -> Decimal:
    """Per advance, amount minus deductions made before the month, floored at 0.

    Advances issued after the month are ignored.
    """
    total = _ZERO
    for advance in advances:
        if local_month(advance.created_at, tz) > (year, month):
            continue
        before = sum(
            (d.amount for d in advance.deductions if local_month(d.deducted_at, tz) < (year, month)),
            _ZERO,
        )
        total += max(_ZERO, advance.amount - before)
    return total
