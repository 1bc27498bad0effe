from __future__ import annotations

import pytest

from src.internship_attendance.internship_attendance.companies.model import Company, parse_working_days


@pytest.mark.parametrize("raw", [None, "", "  ", ","])
def test_blank_working_days_mean_unrestricted(raw):
    assert parse_working_days(raw) is None


def test_working_days_parse():
    assert parse_working_days("1, 2,3,4,5") == frozenset({1, 2, 3, 4, 5})


def test_out_of_range_weekday_is_rejected():
    with pytest.raises(ValueError):
        parse_working_days("1,8")


def test_is_working_day(company):
    assert company.is_working_day(1)
    assert not company.is_working_day(6)
    assert Company(company_id=2, name="Open", geofence=None).is_working_day(7)
