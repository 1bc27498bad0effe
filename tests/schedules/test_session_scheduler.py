from __future__ import annotations

from datetime import time

import pytest

from src.internship_attendance.internship_attendance.core.enums import ErrorCode, SessionType
from src.internship_attendance.internship_attendance.core.exceptions import ConfigError
from src.internship_attendance.internship_attendance.schedules.service import (
    ScheduleService,
    SessionScheduler,
    resolve_schedule,
)
from tests.fakes import InMemorySettings


@pytest.mark.parametrize(
    "clock, ok",
    [
        ("07:44", False),
        ("07:45", True),
        ("11:45", True),
        ("11:45:59", True),
        ("11:46", False),
    ],
)
def test_morning_window_boundaries_are_inclusive(default_schedule, clock, ok):
    check = SessionScheduler().validate_session_time(clock, SessionType.MORNING, default_schedule)
    assert check.ok is ok


def test_rejection_names_the_boundary(default_schedule):
    scheduler = SessionScheduler()

    early = scheduler.validate_session_time("07:44", SessionType.MORNING, default_schedule)
    late = scheduler.validate_session_time("16:46", SessionType.AFTERNOON, default_schedule)

    assert early.reason == "Morning check-in opens at 07:45"
    assert late.reason == "Afternoon check-in closed at 16:45"


def test_window_wrapping_midnight():
    config = resolve_schedule(
        {
            "afternoon_checkin_start": "22:00",
            "afternoon_checkin_end": "02:00",
            "afternoon_standard_start": "22:30",
        }
    )
    scheduler = SessionScheduler()

    assert scheduler.validate_session_time("23:15", SessionType.AFTERNOON, config).ok
    assert scheduler.validate_session_time("00:30", SessionType.AFTERNOON, config).ok
    assert scheduler.validate_session_time("02:00", SessionType.AFTERNOON, config).ok
    rejected = scheduler.validate_session_time("12:00", SessionType.AFTERNOON, config)
    assert not rejected.ok
    assert "22:00" in rejected.reason and "02:00" in rejected.reason


def test_late_minutes(default_schedule):
    scheduler = SessionScheduler()
    assert scheduler.calculate_late_minutes("08:00", SessionType.MORNING, default_schedule) == 0
    assert scheduler.calculate_late_minutes("07:50", SessionType.MORNING, default_schedule) == 0
    assert scheduler.calculate_late_minutes("08:15", SessionType.MORNING, default_schedule) == 15
    assert scheduler.calculate_late_minutes(time(13, 40), SessionType.AFTERNOON, default_schedule) == 40


def test_missing_settings_resolve_to_fallback_schedule():
    config = ScheduleService(InMemorySettings(None)).load_snapshot()

    assert config.is_fallback
    assert config.morning.checkin_start == time(7, 45)
    assert config.morning.checkin_end == time(11, 45)
    assert config.afternoon.checkin_start == time(12, 45)
    assert config.afternoon.checkin_end == time(16, 45)


def test_partial_settings_fill_only_missing_values():
    config = resolve_schedule({"morning_checkin_start": time(7, 0), "morning_checkin_end": None})

    assert config.morning.checkin_start == time(7, 0)
    assert config.morning.checkin_end == time(11, 45)
    assert config.is_fallback


def test_complete_settings_are_not_fallback():
    raw = {
        "morning_checkin_start": "07:30",
        "morning_checkin_end": "11:30",
        "morning_standard_start": "08:00",
        "afternoon_checkin_start": "12:30",
        "afternoon_checkin_end": "16:30",
        "afternoon_standard_start": "13:00",
    }
    assert resolve_schedule(raw).is_fallback is False


def test_malformed_setting_is_config_error():
    with pytest.raises(ConfigError) as exc:
        resolve_schedule({"morning_checkin_start": "seven"})
    assert exc.value.code == ErrorCode.INVALID_SCHEDULE
