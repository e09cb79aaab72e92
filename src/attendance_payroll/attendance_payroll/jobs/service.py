from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from typing import Any, Callable

from ..core.exceptions import NotFoundError
from .model import JobRecord
from .store import JobStore

logger = logging.getLogger(__name__)

JobFunction = Callable[[Callable[[int], None]], Any]


class JobRunner:
    """Runs long operations on an executor and tracks them in a ``JobStore``.

    The submitted function receives a ``progress(percent)`` callback; its
    return value becomes the job's ``return_value``.
    """

    def __init__(self, store: JobStore, executor: Executor):
        self._store = store
        self._executor = executor

    def _run(self, job_id: str, fn: JobFunction) -> Any:
        self._store.start(job_id)
        try:
            result = fn(lambda percent: self._store.update_progress(job_id, percent))
        except Exception as exc:
            logger.exception("Job %s failed", job_id)
            self._store.fail(job_id, str(exc))
            raise
        self._store.complete(job_id, result)
        return result

    def submit(self, name: str, fn: JobFunction) -> tuple[JobRecord, Future]:
        job = self._store.create(name)
        future = self._executor.submit(self._run, job.job_id, fn)
        logger.info("Job %s (%s) queued", job.job_id, name)
        return job, future

    def status(self, job_id: str) -> JobRecord:
        job = self._store.get(job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job
