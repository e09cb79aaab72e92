from decimal import Decimal

import pytest

from attendance_payroll.common.validators import (
    require_id,
    require_non_negative_amount,
    require_positive_amount,
    require_report_period,
    require_tenant,
)
from attendance_payroll.core.exceptions import ValidationError


def test_require_tenant():
    assert require_tenant(" acme ") == "acme"
    for bad in ("", None, "main", 5):
        with pytest.raises(ValidationError, match="Company name is missing"):
            require_tenant(bad)


def test_require_positive_amount():
    assert require_positive_amount("12.50") == Decimal("12.50")
    for bad in (0, "-1", "NaN", "x", True):
        with pytest.raises(ValidationError):
            require_positive_amount(bad)


def test_amounts_are_limited_to_cents():
    assert require_positive_amount("12.50") == Decimal("12.50")
    assert require_positive_amount("1.230") == Decimal("1.23")
    assert require_non_negative_amount("0", "Salary") == 0
    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        require_positive_amount("0.005", "Deduction amount")
    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        require_non_negative_amount("100.001", "Salary")


def test_require_report_period():
    assert require_report_period("2025", "3") == (2025, 3)
    with pytest.raises(ValidationError, match="Invalid month"):
        require_report_period(2025, 13)
    with pytest.raises(ValidationError, match="Invalid year"):
        require_report_period(2019, 1)


def test_require_id():
    assert require_id("7", "worker id") == 7
    with pytest.raises(ValidationError, match="worker id is required"):
        require_id(None, "worker id")
    with pytest.raises(ValidationError, match="Invalid worker id"):
        require_id("0", "worker id")
