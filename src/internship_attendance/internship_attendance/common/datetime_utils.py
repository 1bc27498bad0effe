from __future__ import annotations

from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: str | time) -> time:
    """Parse 'HH:MM' or 'HH:MM:SS' into a time of day."""
    if isinstance(value, time):
        return value

    parts = str(value).strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)


def minutes_since_midnight(value: str | time) -> int:
    t = parse_clock_time(value)
    return t.hour * 60 + t.minute


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")

