from decimal import Decimal

import pytest

from attendance_payroll.core.exceptions import NotFoundError, ValidationError

from conftest import OTHER_TENANT, TENANT, make_worker, utc


@pytest.fixture
def debtor(workers):
    return workers.add(make_worker(5, salary="10000"))


def test_issue_then_partial_deduction(container, workers, debtor):
    ledger = container.advance_ledger

    advance = ledger.issue(TENANT, debtor.worker_id, "1000", now=utc(2025, 3, 1, 6))
    assert advance.remaining_amount == Decimal("1000")
    assert advance.description == "Advance Voucher"
    assert workers.get_by_id(TENANT, debtor.worker_id).final_salary == Decimal("9000")

    updated = ledger.deduct(TENANT, advance.advance_id, 300, now=utc(2025, 3, 10, 6))
    assert updated.remaining_amount == Decimal("700")
    assert updated.deductions[0].amount == Decimal("300")
    assert updated.deductions[0].description == "Partial deduction"
    assert updated.deducted_total == Decimal("300")
    assert workers.get_by_id(TENANT, debtor.worker_id).final_salary == Decimal("9300")


def test_over_deduction_is_rejected_without_changes(container, workers, debtor):
    ledger = container.advance_ledger
    advance = ledger.issue(TENANT, debtor.worker_id, 1000)
    ledger.deduct(TENANT, advance.advance_id, 300)

    with pytest.raises(ValidationError, match=r"Only ₹700\.00 available"):
        ledger.deduct(TENANT, advance.advance_id, 800)

    assert ledger.list_for_worker(TENANT, debtor.worker_id)[0].remaining_amount == Decimal("700")
    assert workers.get_by_id(TENANT, debtor.worker_id).final_salary == Decimal("9300")


def test_deducting_the_exact_remainder_clears_it(container, debtor):
    ledger = container.advance_ledger
    advance = ledger.issue(TENANT, debtor.worker_id, 1000)

    assert ledger.deduct(TENANT, advance.advance_id, 1000).remaining_amount == 0


@pytest.mark.parametrize("amount", [0, -5, "abc", None, True])
def test_invalid_amounts(container, debtor, amount):
    with pytest.raises(ValidationError):
        container.advance_ledger.issue(TENANT, debtor.worker_id, amount)


def test_advances_are_tenant_scoped(container, debtor):
    ledger = container.advance_ledger
    advance = ledger.issue(TENANT, debtor.worker_id, 1000)

    with pytest.raises(NotFoundError, match="Advance not found"):
        ledger.deduct(OTHER_TENANT, advance.advance_id, 100)
    with pytest.raises(NotFoundError, match="Worker not found"):
        ledger.issue(OTHER_TENANT, debtor.worker_id, 1000)

    assert ledger.list_for_tenant(OTHER_TENANT) == []
    assert [a.advance_id for a in ledger.list_for_tenant(TENANT)] == [advance.advance_id]


def test_sub_cent_deduction_is_rejected(container, workers, debtor):
    ledger = container.advance_ledger
    advance = ledger.issue(TENANT, debtor.worker_id, "1000.00")

    with pytest.raises(ValidationError, match="at most 2 decimal places"):
        ledger.deduct(TENANT, advance.advance_id, "0.005")

    unchanged = ledger.list_for_worker(TENANT, debtor.worker_id)[0]
    assert unchanged.remaining_amount == Decimal("1000.00")
    assert unchanged.deductions == ()
    assert workers.get_by_id(TENANT, debtor.worker_id).final_salary == Decimal("9000.00")
