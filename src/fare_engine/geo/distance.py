"""Centralized geographic distance calculations.

This module provides Haversine distance calculations in statute miles for
pricing transfer trips. Multi-leg trips are measured by summing the
great-circle distance of each consecutive pair of waypoints.
"""

from collections.abc import Sequence
from math import atan2, cos, isfinite, radians, sin, sqrt
from typing import Protocol

from fare_engine.core.exceptions import InvalidLocationError

EARTH_RADIUS_MILES = 3959.0


class GeoPoint(Protocol):
    lat: float | None
    lon: float | None


def haversine_miles(a: GeoPoint, b: GeoPoint) -> float:
    """Calculate the great-circle distance between two points in miles.

    Args:
        a: First point (any object with ``lat``/``lon`` in degrees)
        b: Second point

    Returns:
        Distance between the two points in miles
    """
    lat1, lon1, lat2, lon2 = map(radians, [a.lat, a.lon, b.lat, b.lon])
    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(h), sqrt(1 - h))

    return EARTH_RADIUS_MILES * c


def path_miles(points: Sequence[GeoPoint]) -> float:
    """Sum the haversine distance over consecutive waypoints, in order.

    A path with fewer than two points has zero length.
    """
    return sum(
        (haversine_miles(start, end) for start, end in zip(points, points[1:])),
        0.0,
    )


def validate_point(point: GeoPoint | None, role: str) -> None:
    """Raise InvalidLocationError unless ``point`` holds usable coordinates."""
    if point is None:
        raise InvalidLocationError(f"{role} location is required", details={"role": role})

    lat, lon = point.lat, point.lon
    if lat is None or lon is None:
        raise InvalidLocationError(
            f"{role} location is missing coordinates", details={"role": role}
        )
    if not (isfinite(lat) and isfinite(lon)):
        raise InvalidLocationError(
            f"{role} coordinates must be finite", details={"role": role}
        )
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        raise InvalidLocationError(
            f"{role} coordinates out of range",
            details={"role": role, "lat": lat, "lon": lon},
        )
