from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import SessionType


@dataclass(frozen=True)
class SessionWindow:
    """Check-in window and standard start of one half-day session."""

    checkin_start: time
    checkin_end: time
    standard_start: time

    @property
    def wraps_midnight(self) -> bool:
        return self.checkin_end <= self.checkin_start


@dataclass(frozen=True)
class ScheduleConfig:
    """Immutable schedule snapshot, resolved once per request."""

    morning: SessionWindow
    afternoon: SessionWindow
    is_fallback: bool = False

    def window_for(self, session: SessionType) -> SessionWindow:
        if session == SessionType.MORNING:
            return self.morning
        return self.afternoon
