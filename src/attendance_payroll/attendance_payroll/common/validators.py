from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from ..core.constants import MONEY_QUANTUM, REPORT_MAX_YEAR, REPORT_MIN_YEAR, RESERVED_TENANT
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_tenant(value: str) -> str:
    tenant = (value or "").strip() if isinstance(value, str) else ""
    if not tenant or tenant == RESERVED_TENANT:
        raise ValidationError("Company name is missing, login again")
    return tenant


# money columns hold two decimal places
def _require_cents(amount: Decimal, field_name: str) -> None:
    if amount.normalize().as_tuple().exponent < MONEY_QUANTUM.as_tuple().exponent:
        raise ValidationError(f"{field_name} must have at most 2 decimal places")


def require_positive_amount(value, field_name: str = "Amount") -> Decimal:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a positive number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    _require_cents(amount, field_name)
    return amount


def require_coordinate(value, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if math.isnan(number) or math.isinf(number):
        raise ValidationError(f"{field_name} must be a number")
    return number


def require_report_period(year, month) -> tuple[int, int]:
    if year in (None, "") or month in (None, ""):
        raise ValidationError("Year and month are required")
    try:
        month_num = int(month)
    except (TypeError, ValueError):
        raise ValidationError("Invalid month. Must be between 1 and 12")
    if month_num < 1 or month_num > 12:
        raise ValidationError("Invalid month. Must be between 1 and 12")
    try:
        year_num = int(year)
    except (TypeError, ValueError):
        raise ValidationError("Invalid year")
    if year_num < REPORT_MIN_YEAR or year_num > REPORT_MAX_YEAR:
        raise ValidationError("Invalid year")
    return year_num, month_num


def require_id(value, field_name: str) -> int:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}")
    if number <= 0:
        raise ValidationError(f"Invalid {field_name}")
    return number


def require_non_negative_amount(value, field_name: str) -> Decimal:
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field_name} is required")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a valid number")
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"{field_name} must be a valid number")
    _require_cents(amount, field_name)
    return amount
