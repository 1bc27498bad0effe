from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import time
from typing import Any, Mapping, Optional

from ..common.datetime_utils import format_hhmm, minutes_since_midnight, parse_clock_time
from ..core import constants
from ..core.enums import ErrorCode, SessionType
from ..core.exceptions import ConfigError
from .model import ScheduleConfig, SessionWindow
from .repository import SystemSettingsRepository

logger = logging.getLogger(__name__)

_DEFAULTS: dict[str, time] = {
    "morning_checkin_start": constants.DEFAULT_MORNING_CHECKIN_START,
    "morning_checkin_end": constants.DEFAULT_MORNING_CHECKIN_END,
    "morning_standard_start": constants.DEFAULT_MORNING_STANDARD_START,
    "afternoon_checkin_start": constants.DEFAULT_AFTERNOON_CHECKIN_START,
    "afternoon_checkin_end": constants.DEFAULT_AFTERNOON_CHECKIN_END,
    "afternoon_standard_start": constants.DEFAULT_AFTERNOON_STANDARD_START,
}


def resolve_schedule(raw: Optional[Mapping[str, Any]]) -> ScheduleConfig:
    """Build the one canonical schedule snapshot from raw settings.

    Missing values fall back to the built-in schedule; values that are
    present but unparseable raise ConfigError.
    """

    raw = raw or {}
    resolved: dict[str, time] = {}
    missing: list[str] = []

    for key, default in _DEFAULTS.items():
        value = raw.get(key)
        if value is None or value == "":
            resolved[key] = default
            missing.append(key)
            continue
        try:
            resolved[key] = parse_clock_time(value)
        except (TypeError, ValueError):
            raise ConfigError(
                f"System setting {key} has an invalid time value {value!r}",
                code=ErrorCode.INVALID_SCHEDULE,
            ) from None

    if missing:
        logger.warning("Session schedule incomplete, using defaults for: %s", ", ".join(missing))

    return ScheduleConfig(
        morning=SessionWindow(
            checkin_start=resolved["morning_checkin_start"],
            checkin_end=resolved["morning_checkin_end"],
            standard_start=resolved["morning_standard_start"],
        ),
        afternoon=SessionWindow(
            checkin_start=resolved["afternoon_checkin_start"],
            checkin_end=resolved["afternoon_checkin_end"],
            standard_start=resolved["afternoon_standard_start"],
        ),
        is_fallback=bool(missing),
    )


@dataclass(frozen=True)
class WindowCheck:
    ok: bool
    reason: Optional[str] = None


class SessionScheduler:
    """Time-window and lateness arithmetic against a schedule snapshot.

    Window boundaries are inclusive on both ends for both sessions; clock
    times are compared at minute precision (seconds are dropped).
    """

    def validate_session_time(self, value: str | time, session: SessionType, config: ScheduleConfig) -> WindowCheck:
        window = config.window_for(session)
        t = minutes_since_midnight(value)
        start = minutes_since_midnight(window.checkin_start)
        end = minutes_since_midnight(window.checkin_end)
        start_s = format_hhmm(window.checkin_start)
        end_s = format_hhmm(window.checkin_end)

        if window.wraps_midnight:
            if t >= start or t <= end:
                return WindowCheck(ok=True)
            return WindowCheck(
                ok=False,
                reason=f"{session.label} check-in is only allowed from {start_s} to {end_s} (next day)",
            )

        if t < start:
            return WindowCheck(ok=False, reason=f"{session.label} check-in opens at {start_s}")
        if t > end:
            return WindowCheck(ok=False, reason=f"{session.label} check-in closed at {end_s}")
        return WindowCheck(ok=True)

    def calculate_late_minutes(self, value: str | time, session: SessionType, config: ScheduleConfig) -> int:
        window = config.window_for(session)
        return max(0, minutes_since_midnight(value) - minutes_since_midnight(window.standard_start))


class ScheduleService:
    def __init__(self, settings: SystemSettingsRepository):
        self._settings = settings

    def load_snapshot(self) -> ScheduleConfig:
        return resolve_schedule(self._settings.get_session_settings())
