from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import CheckInMethod, ClockAction, SessionState, SessionStatus, SessionType
from ..location.model import DevicePosition


def _hms(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


@dataclass(frozen=True)
class SessionRecord:
    """Domain entity: one half-day session of one student on one date."""

    record_id: int
    student_id: str
    work_date: date
    session: SessionType
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    total_hours: float = 0.0
    late_minutes: int = 0
    location_verified: bool = False
    is_verified: bool = False
    check_in_method: CheckInMethod = CheckInMethod.GPS
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    remarks: Optional[str] = None

    @property
    def state(self) -> SessionState:
        if self.check_out_time is not None:
            return SessionState.CHECKED_OUT
        if self.check_in_time is not None:
            return SessionState.CHECKED_IN
        return SessionState.NOT_STARTED

    @property
    def status(self) -> SessionStatus:
        if self.state == SessionState.CHECKED_OUT:
            return SessionStatus.COMPLETE
        if self.state == SessionState.CHECKED_IN:
            return SessionStatus.IN_PROGRESS
        return SessionStatus.ABSENT

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "student_id": self.student_id,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "session": self.session.value,
            "state": self.state.value,
            "check_in_time": _hms(self.check_in_time),
            "check_out_time": _hms(self.check_out_time),
            "total_hours": self.total_hours,
            "late_minutes": self.late_minutes,
            "location_verified": self.location_verified,
            "is_verified": self.is_verified,
            "check_in_method": self.check_in_method.value,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class TimesheetReportRow:
    """Read-model: a session record joined with read-only student identity."""

    record: SessionRecord
    full_name: str
    student_number: Optional[str] = None
    course: Optional[str] = None
    company_id: Optional[int] = None


@dataclass(frozen=True)
class ClockEvent:
    student_id: str
    work_date: date
    session: SessionType
    action: ClockAction
    time: time
    location: Optional[DevicePosition] = None
    remarks: Optional[str] = None
