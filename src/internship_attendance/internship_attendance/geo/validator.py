from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class GeofenceCheck:
    valid: bool
    distance: float
    radius: float

    @property
    def message(self) -> str:
        if self.valid:
            return f"Location verified ({self.distance:.0f}m from the company)"
        return (
            f"You are {self.distance:.0f} meters away from the company, "
            f"but you need to be within {self.radius:.0f} meters to clock in"
        )


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle (haversine) distance between two points in meters."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def is_within_geofence(point: GeoPoint, center: GeoPoint, radius_meters: float) -> GeofenceCheck:
    distance = distance_meters(point, center)
    return GeofenceCheck(valid=distance <= radius_meters, distance=distance, radius=float(radius_meters))
