from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from typing import Any, Optional, Protocol

from ..core.enums import JobState
from .model import JobRecord


class JobStore(Protocol):
    def create(self, name: str) -> JobRecord:
        raise NotImplementedError

    def get(self, job_id: str) -> Optional[JobRecord]:
        raise NotImplementedError

    def start(self, job_id: str) -> None:
        raise NotImplementedError

    def update_progress(self, job_id: str, progress: int) -> None:
        raise NotImplementedError

    def complete(self, job_id: str, return_value: Any = None) -> None:
        raise NotImplementedError

    def fail(self, job_id: str, reason: str) -> None:
        raise NotImplementedError


class InMemoryJobStore(JobStore):
    """Process-local job status map; records do not survive a restart."""

    def __init__(self):
        self._jobs: dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def _update(self, job_id: str, **changes) -> None:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is not None:
                self._jobs[job_id] = replace(job, **changes)

    def create(self, name: str) -> JobRecord:
        job = JobRecord(job_id=uuid.uuid4().hex, name=name)
        with self._lock:
            self._jobs[job.job_id] = job
        return job

    def get(self, job_id: str) -> Optional[JobRecord]:
        with self._lock:
            return self._jobs.get(job_id)

    def start(self, job_id: str) -> None:
        self._update(job_id, state=JobState.ACTIVE)

    def update_progress(self, job_id: str, progress: int) -> None:
        self._update(job_id, progress=max(0, min(100, int(progress))))

    def complete(self, job_id: str, return_value: Any = None) -> None:
        self._update(job_id, state=JobState.COMPLETED, progress=100, return_value=return_value)

    def fail(self, job_id: str, reason: str) -> None:
        self._update(job_id, state=JobState.FAILED, reason=reason)
