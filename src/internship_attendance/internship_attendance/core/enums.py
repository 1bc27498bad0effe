from __future__ import annotations

from enum import Enum


class SessionType(str, Enum):
    """Half-day session a clock event belongs to."""

    MORNING = "morning"
    AFTERNOON = "afternoon"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ClockAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class SessionState(str, Enum):
    """Per-session lifecycle. CHECKED_OUT is terminal."""

    NOT_STARTED = "NOT_STARTED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class SessionStatus(str, Enum):
    ABSENT = "absent"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class CheckInMethod(str, Enum):
    GPS = "gps"
    MANUAL = "manual"


class SignalConfidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DailyStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half_day"


class ErrorCode(str, Enum):
    """Machine-readable reason carried by every domain error."""

    NO_COMPANY = "NoCompany"
    MISSING_GEOFENCE = "MissingGeofence"
    INVALID_SCHEDULE = "InvalidSchedule"
    INVALID_INPUT = "InvalidInput"
    OUTSIDE_GEOFENCE = "OutsideGeofence"
    SPOOFING_SUSPECTED = "SpoofingSuspected"
    NON_WORKING_DAY = "NonWorkingDay"
    OUTSIDE_WINDOW = "OutsideWindow"
    BAD_SEQUENCE = "BadSequence"
    ALREADY_CHECKED_IN = "AlreadyCheckedIn"
    ALREADY_CHECKED_OUT = "AlreadyCheckedOut"
    NO_ACTIVE_SESSION = "NoActiveSession"
