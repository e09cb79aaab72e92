from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced tenant record does not exist."""


class MissingConfigurationError(DomainError):
    """Raised when tenant configuration required by a computation is absent."""


class LocationDeniedError(DomainError):
    """Raised when a punch fails the tenant geofence."""

    def __init__(self, message: str, *, reason, distance_m: Optional[float] = None):
        super().__init__(message)
        self.reason = reason
        self.distance_m = distance_m


class AttendanceDataError(DomainError):
    """Raised when stored attendance events cannot be interpreted."""
