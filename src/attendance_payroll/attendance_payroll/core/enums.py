from __future__ import annotations

from enum import Enum


class LeaveStatus(str, Enum):
    """Approval state of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class LeaveType(str, Enum):
    ANNUAL = "Annual Leave"
    SICK = "Sick Leave"
    PERSONAL = "Personal Leave"
    PERMISSION = "Permission"


class GeofenceReason(str, Enum):
    """Why a punch location was accepted or refused."""

    DISABLED = "DISABLED"
    WITHIN_RADIUS = "WITHIN_RADIUS"
    NO_LOCATION = "NO_LOCATION"
    OUT_OF_RANGE = "OUT_OF_RANGE"


class JobState(str, Enum):
    QUEUED = "queued"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"
