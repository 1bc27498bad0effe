from __future__ import annotations

from datetime import datetime

import pytest

from src.internship_attendance.internship_attendance.companies.model import Company, CompanyGeofence
from src.internship_attendance.internship_attendance.schedules.service import resolve_schedule


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 8, 0, 0)


@pytest.fixture
def default_schedule():
    return resolve_schedule(None)


@pytest.fixture
def company() -> Company:
    return Company(
        company_id=1,
        name="Acme Corp",
        geofence=CompanyGeofence(center_lat=0.0, center_lng=0.0, radius_meters=100),
        working_days=frozenset({1, 2, 3, 4, 5}),
    )
