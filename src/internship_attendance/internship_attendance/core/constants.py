"""Geofence, anti-spoofing and schedule constants and defaults."""

from datetime import time

EARTH_RADIUS_METERS = 6371000.0

# Added on top of the company radius to absorb GPS jitter.
GEOFENCE_TOLERANCE_METERS = 20.0

DEFAULT_MAX_SPEED_KMH = 200.0

# Signal checks on what the device reports.
MAX_POSITION_AGE_SECONDS = 30
MAX_POSITION_CLOCK_SKEW_SECONDS = 5
MIN_PLAUSIBLE_ACCURACY_METERS = 1.0
MAX_PLAUSIBLE_ACCURACY_METERS = 5000.0
MAX_DEVICE_SPEED_MPS = 50.0

# Fallback session schedule used when system settings are not configured.
DEFAULT_MORNING_CHECKIN_START = time(7, 45)
DEFAULT_MORNING_CHECKIN_END = time(11, 45)
DEFAULT_MORNING_STANDARD_START = time(8, 0)
DEFAULT_AFTERNOON_CHECKIN_START = time(12, 45)
DEFAULT_AFTERNOON_CHECKIN_END = time(16, 45)
DEFAULT_AFTERNOON_STANDARD_START = time(13, 0)

FULL_DAY_HOURS = 7.0
