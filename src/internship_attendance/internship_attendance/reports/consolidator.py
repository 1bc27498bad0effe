from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from ..core.constants import FULL_DAY_HOURS
from ..core.enums import DailyStatus, SessionStatus, SessionType
from ..timesheets.model import SessionRecord, TimesheetReportRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionFields:
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_hours: float = 0.0
    late_minutes: int = 0
    is_verified: bool = False

    @property
    def status(self) -> SessionStatus:
        if self.check_in and self.check_out:
            return SessionStatus.COMPLETE
        if self.check_in:
            return SessionStatus.IN_PROGRESS
        return SessionStatus.ABSENT

    @classmethod
    def from_record(cls, record: SessionRecord):
        return cls(
            check_in=record.check_in_time,
            check_out=record.check_out_time,
            total_hours=float(record.total_hours or 0),
            late_minutes=int(record.late_minutes or 0),
            is_verified=bool(record.is_verified),
        )


@dataclass(frozen=True)
class MorningFields(SessionFields):
    pass


@dataclass(frozen=True)
class AfternoonFields(SessionFields):
    pass


def determine_daily_status(morning_hours: float, afternoon_hours: float) -> DailyStatus:
    total = morning_hours + afternoon_hours
    if total <= 0:
        return DailyStatus.ABSENT
    if morning_hours <= 0 or afternoon_hours <= 0:
        return DailyStatus.HALF_DAY
    if total >= FULL_DAY_HOURS:
        return DailyStatus.PRESENT
    return DailyStatus.HALF_DAY


def _hms(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%H:%M:%S") if value else None


@dataclass(frozen=True)
class DailyAttendanceProjection:
    """One merged row per (student_id, work_date)."""

    student_id: str
    work_date: date
    morning: MorningFields = field(default_factory=MorningFields)
    afternoon: AfternoonFields = field(default_factory=AfternoonFields)
    full_name: Optional[str] = None
    student_number: Optional[str] = None
    course: Optional[str] = None
    company_id: Optional[int] = None

    @property
    def morning_check_in(self) -> Optional[datetime]:
        return self.morning.check_in

    @property
    def morning_check_out(self) -> Optional[datetime]:
        return self.morning.check_out

    @property
    def total_morning_hours(self) -> float:
        return self.morning.total_hours

    @property
    def afternoon_check_in(self) -> Optional[datetime]:
        return self.afternoon.check_in

    @property
    def afternoon_check_out(self) -> Optional[datetime]:
        return self.afternoon.check_out

    @property
    def total_afternoon_hours(self) -> float:
        return self.afternoon.total_hours

    @property
    def total_hours(self) -> float:
        return round(self.morning.total_hours + self.afternoon.total_hours, 2)

    @property
    def is_verified(self) -> bool:
        # A half-verified day still counts as (partially) verified.
        return self.morning.is_verified or self.afternoon.is_verified

    @property
    def status(self) -> DailyStatus:
        return determine_daily_status(self.morning.total_hours, self.afternoon.total_hours)

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "full_name": self.full_name,
            "student_number": self.student_number,
            "course": self.course,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "morning_check_in": _hms(self.morning_check_in),
            "morning_check_out": _hms(self.morning_check_out),
            "morning_late_minutes": self.morning.late_minutes,
            "total_morning_hours": self.total_morning_hours,
            "afternoon_check_in": _hms(self.afternoon_check_in),
            "afternoon_check_out": _hms(self.afternoon_check_out),
            "afternoon_late_minutes": self.afternoon.late_minutes,
            "total_afternoon_hours": self.total_afternoon_hours,
            "total_hours": self.total_hours,
            "status": self.status.value,
            "is_verified": self.is_verified,
        }


class _DayBuilder:
    def __init__(self, student_id: str, work_date: date):
        self.student_id = student_id
        self.work_date = work_date
        self.morning: Optional[MorningFields] = None
        self.afternoon: Optional[AfternoonFields] = None
        self.identity: dict = {}

    def add(self, record: SessionRecord) -> None:
        if record.session == SessionType.MORNING:
            if self.morning is not None:
                logger.warning("Duplicate morning record %s for %s on %s ignored", record.record_id, self.student_id, self.work_date)
                return
            self.morning = MorningFields.from_record(record)
        else:
            if self.afternoon is not None:
                logger.warning("Duplicate afternoon record %s for %s on %s ignored", record.record_id, self.student_id, self.work_date)
                return
            self.afternoon = AfternoonFields.from_record(record)

    def build(self) -> DailyAttendanceProjection:
        return DailyAttendanceProjection(
            student_id=self.student_id,
            work_date=self.work_date,
            morning=self.morning or MorningFields(),
            afternoon=self.afternoon or AfternoonFields(),
            **self.identity,
        )


class AttendanceConsolidator:
    """Merge per-session records into daily projections."""

    def consolidate(self, rows: Iterable[Union[SessionRecord, TimesheetReportRow]]) -> List[DailyAttendanceProjection]:
        days: dict[tuple[str, date], _DayBuilder] = {}

        for row in rows:
            if isinstance(row, TimesheetReportRow):
                record = row.record
                identity = {
                    "full_name": row.full_name,
                    "student_number": row.student_number,
                    "course": row.course,
                    "company_id": row.company_id,
                }
            else:
                record, identity = row, {}

            key = (record.student_id, record.work_date)
            builder = days.get(key)
            if builder is None:
                builder = _DayBuilder(record.student_id, record.work_date)
                days[key] = builder
            if identity and not builder.identity:
                builder.identity = identity
            builder.add(record)

        projections = [b.build() for b in days.values()]
        projections.sort(key=lambda p: (p.full_name or "", p.student_id))
        projections.sort(key=lambda p: p.work_date, reverse=True)
        return projections


@dataclass(frozen=True)
class AttendanceSummary:
    total_records: int = 0
    present_days: int = 0
    absent_days: int = 0
    half_days: int = 0
    total_hours: float = 0.0
    average_hours: float = 0.0
    late_arrivals: int = 0
    morning_complete: int = 0
    afternoon_complete: int = 0
    morning_in_progress: int = 0
    afternoon_in_progress: int = 0

    def to_dict(self) -> dict:
        return {
            "total_records": self.total_records,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "half_days": self.half_days,
            "total_hours": self.total_hours,
            "average_hours": self.average_hours,
            "late_arrivals": self.late_arrivals,
            "sessions": {
                "morning_complete": self.morning_complete,
                "afternoon_complete": self.afternoon_complete,
                "morning_in_progress": self.morning_in_progress,
                "afternoon_in_progress": self.afternoon_in_progress,
            },
        }


def summarize(projections: Iterable[DailyAttendanceProjection]) -> AttendanceSummary:
    items = list(projections)
    statuses = [p.status for p in items]
    total_hours = round(sum(p.total_hours for p in items), 2)

    return AttendanceSummary(
        total_records=len(items),
        present_days=statuses.count(DailyStatus.PRESENT),
        absent_days=statuses.count(DailyStatus.ABSENT),
        half_days=statuses.count(DailyStatus.HALF_DAY),
        total_hours=total_hours,
        average_hours=round(total_hours / max(1, len(items)), 2),
        late_arrivals=sum(1 for p in items if p.morning.late_minutes > 0 or p.afternoon.late_minutes > 0),
        morning_complete=sum(1 for p in items if p.morning.status == SessionStatus.COMPLETE),
        afternoon_complete=sum(1 for p in items if p.afternoon.status == SessionStatus.COMPLETE),
        morning_in_progress=sum(1 for p in items if p.morning.status == SessionStatus.IN_PROGRESS),
        afternoon_in_progress=sum(1 for p in items if p.afternoon.status == SessionStatus.IN_PROGRESS),
    )
