from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import JobState


@dataclass(frozen=True)
class JobRecord:
    job_id: str
    name: str
    state: JobState = JobState.QUEUED
    progress: int = 0
    reason: Optional[str] = None
    return_value: Any = None
