from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..geo.validator import GeoPoint


@dataclass(frozen=True)
class DevicePosition:
    """Location as reported by the student's device."""

    lat: float
    lng: float
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    altitude_accuracy: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    timestamp: Optional[datetime] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class LocationSample:
    """Append-only history entry written on each successful check-in."""

    student_id: str
    lat: float
    lng: float
    timestamp: datetime
    session_record_id: Optional[int] = None
    accuracy: Optional[float] = None
    altitude: Optional[float] = None
    altitude_accuracy: Optional[float] = None
    heading: Optional[float] = None
    speed: Optional[float] = None
    sample_id: Optional[int] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)

    @classmethod
    def from_position(
        cls,
        *,
        student_id: str,
        position: DevicePosition,
        timestamp: datetime,
        session_record_id: Optional[int],
    ) -> "LocationSample":
        return cls(
            student_id=student_id,
            lat=position.lat,
            lng=position.lng,
            timestamp=timestamp,
            session_record_id=session_record_id,
            accuracy=position.accuracy,
            altitude=position.altitude,
            altitude_accuracy=position.altitude_accuracy,
            heading=position.heading,
            speed=position.speed,
        )
