from __future__ import annotations

import logging
from decimal import Decimal

from ..common.validators import require_id, require_non_negative_amount, require_positive_amount, require_tenant
from ..core.constants import NOMINAL_SALARY_DIVISOR
from ..core.exceptions import NotFoundError
from ..workers.model import Worker
from ..workers.repository import WorkerRepository

logger = logging.getLogger(__name__)


def nominal_per_day_salary(salary: Decimal) -> Decimal:
    """Fixed ``salary / 30`` rate stored on the worker; leave deductions use it."""
    return Decimal(salary) / NOMINAL_SALARY_DIVISOR


class SalaryAdjustmentService:
    """Direct edits of a worker's salary figures outside the monthly report."""

    def __init__(self, workers: WorkerRepository):
        self._workers = workers

    def _require_worker(self, tenant: str, worker_id) -> Worker:
        worker = self._workers.get_by_id(tenant, require_id(worker_id, "worker id"))
        if not worker:
            raise NotFoundError("Worker not found")
        return worker

    def update_salary(self, tenant: str, worker_id, salary) -> Worker:
        """New base salary: the running balance restarts from it."""
        tenant = require_tenant(tenant)
        worker = self._require_worker(tenant, worker_id)
        salary = require_non_negative_amount(salary, "Salary")

        self._workers.update_salary(
            tenant=tenant,
            worker_id=worker.worker_id,
            salary=salary,
            final_salary=salary,
            nominal_per_day_salary=nominal_per_day_salary(salary),
        )
        logger.info("Salary of worker %s (tenant %s) set to %s", worker.worker_id, tenant, salary)
        return self._workers.get_by_id(tenant, worker.worker_id)

    def give_bonus(self, tenant: str, worker_id, amount) -> Worker:
        tenant = require_tenant(tenant)
        worker = self._require_worker(tenant, worker_id)
        amount = require_positive_amount(amount, "Bonus amount")

        self._workers.adjust_final_salary(tenant=tenant, worker_id=worker.worker_id, delta=amount)
        logger.info("Bonus of %s added for worker %s (tenant %s)", amount, worker.worker_id, tenant)
        return self._workers.get_by_id(tenant, worker.worker_id)

    def reset_salaries(self, tenant: str) -> int:
        """Every worker's final salary goes back to the base salary."""
        tenant = require_tenant(tenant)
        if not self._workers.list_for_tenant(tenant):
            raise NotFoundError("No workers found for this subdomain")

        count = self._workers.reset_final_salaries(tenant)
        logger.info("Final salaries reset for %d worker(s) of tenant %s", count, tenant)
        return count
