from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..geo.validator import GeoPoint


@dataclass(frozen=True)
class CompanyGeofence:
    center_lat: float
    center_lng: float
    radius_meters: float

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=self.center_lat, lng=self.center_lng)


@dataclass(frozen=True)
class Company:
    """Read-only view of a company as the attendance engine needs it."""

    company_id: int
    name: str
    geofence: Optional[CompanyGeofence]
    # ISO weekdays (1=Monday..7=Sunday); None means every day is allowed.
    working_days: Optional[FrozenSet[int]] = None

    def is_working_day(self, iso_weekday: int) -> bool:
        if self.working_days is None:
            return True
        return iso_weekday in self.working_days


def parse_working_days(value: Optional[str]) -> Optional[FrozenSet[int]]:
    """Parse the stored '1,2,3,4,5' form. Blank means unrestricted."""

    if value is None or not str(value).strip():
        return None
    days = set()
    for part in str(value).split(","):
        part = part.strip()
        if not part:
            continue
        day = int(part)
        if not 1 <= day <= 7:
            raise ValueError(f"Invalid weekday number: {day}")
        days.add(day)
    return frozenset(days) or None
