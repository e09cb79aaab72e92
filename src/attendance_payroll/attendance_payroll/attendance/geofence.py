"""Location gate for punches: Haversine distance against the tenant zone."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..common.validators import require_coordinate
from ..core.constants import EARTH_RADIUS_METERS
from ..core.enums import GeofenceReason
from ..settings.model import AttendanceLocation


@dataclass(frozen=True)
class GeofenceDecision:
    allowed: bool
    reason: GeofenceReason
    distance_m: Optional[float] = None
    message: str = ""


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    if lat1 == lat2 and lon1 == lon2:
        return 0.0

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def evaluate_geofence(
    location: Optional[AttendanceLocation],
    latitude=None,
    longitude=None,
) -> GeofenceDecision:
    if location is None or not location.enabled:
        return GeofenceDecision(allowed=True, reason=GeofenceReason.DISABLED)

    if latitude in (None, "") or longitude in (None, ""):
        return GeofenceDecision(
            allowed=False,
            reason=GeofenceReason.NO_LOCATION,
            message="Location validation required for attendance but not provided",
        )

    lat = require_coordinate(latitude, "Latitude")
    lon = require_coordinate(longitude, "Longitude")

    distance = haversine_distance(float(location.latitude), float(location.longitude), lat, lon)
    radius = float(location.radius)

    if distance <= radius:
        return GeofenceDecision(
            allowed=True,
            reason=GeofenceReason.WITHIN_RADIUS,
            distance_m=distance,
            message=f"Worker is within {round(distance)} meters of allowed location",
        )

    return GeofenceDecision(
        allowed=False,
        reason=GeofenceReason.OUT_OF_RANGE,
        distance_m=distance,
        message=f"Worker is {round(distance)} meters away from allowed location (max: {round(radius)} meters)",
    )
