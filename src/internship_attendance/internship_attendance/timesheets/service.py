from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..companies.repository import CompanyRepository
from ..core import constants
from ..core.enums import CheckInMethod, ClockAction, ErrorCode, SessionType
from ..core.exceptions import ConfigError, ConflictError, NotFoundError, ValidationError
from ..geo.validator import is_within_geofence
from ..location.anti_spoofing import AntiSpoofingGuard
from ..location.history import LocationHistoryRecorder
from ..location.model import DevicePosition, LocationSample
from ..schedules.model import ScheduleConfig
from ..schedules.service import SessionScheduler
from .model import ClockEvent, SessionRecord
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)

_WEEKDAY_NAMES = {1: "Monday", 2: "Tuesday", 3: "Wednesday", 4: "Thursday", 5: "Friday", 6: "Saturday", 7: "Sunday"}


class TimesheetStateMachine:
    """Check-in / check-out transitions of a (student, date, session) key.

    NOT_STARTED -> CHECKED_IN -> CHECKED_OUT. Every rejected transition raises
    a DomainError subclass; nothing is retried here.
    """

    def __init__(
        self,
        timesheets: TimesheetRepository,
        companies: CompanyRepository,
        guard: AntiSpoofingGuard,
        history_recorder: LocationHistoryRecorder,
        *,
        scheduler: SessionScheduler | None = None,
        geofence_tolerance_meters: float = constants.GEOFENCE_TOLERANCE_METERS,
    ):
        self._timesheets = timesheets
        self._companies = companies
        self._guard = guard
        self._recorder = history_recorder
        self._scheduler = scheduler or SessionScheduler()
        self._tolerance = float(geofence_tolerance_meters)

    def check_in(
        self,
        student_id: str,
        work_date: date,
        session: SessionType,
        clock_time: time,
        location: DevicePosition,
        *,
        schedule: ScheduleConfig,
        remarks: Optional[str] = None,
    ) -> SessionRecord:
        company = self._companies.get_for_student(student_id)
        if company is None:
            raise ConfigError("Student is not assigned to a company", code=ErrorCode.NO_COMPANY)
        if company.geofence is None:
            raise ConfigError(
                f"Company {company.name} has no registered location; ask an administrator to set it up",
                code=ErrorCode.MISSING_GEOFENCE,
            )

        geofence = company.geofence
        check = is_within_geofence(location.point, geofence.center, geofence.radius_meters + self._tolerance)
        if not check.valid:
            logger.info("Check-in rejected for %s: %.0fm from company %s", student_id, check.distance, company.company_id)
            raise ValidationError(check.message, code=ErrorCode.OUTSIDE_GEOFENCE)

        check_in_at = datetime.combine(work_date, clock_time)

        movement = self._guard.detect_impossible_movement(student_id, location.lat, location.lng, check_in_at)
        if not movement.possible:
            raise ValidationError(
                f"Location rejected: moving {movement.distance_meters:.0f}m in {movement.time_diff_seconds:.0f}s "
                "since your last check-in is not plausible",
                code=ErrorCode.SPOOFING_SUSPECTED,
            )

        weekday = work_date.isoweekday()
        if not company.is_working_day(weekday):
            logger.info("Check-in rejected for %s: %s is not a working day", student_id, work_date)
            raise ValidationError(
                f"Cannot clock in on {_WEEKDAY_NAMES[weekday]}: not a working day for {company.name}",
                code=ErrorCode.NON_WORKING_DAY,
            )

        window = self._scheduler.validate_session_time(clock_time, session, schedule)
        if not window.ok:
            logger.info("Check-in rejected for %s at %s: %s", student_id, clock_time, window.reason)
            raise ValidationError(window.reason, code=ErrorCode.OUTSIDE_WINDOW)

        if self._timesheets.get_for_key(student_id=student_id, work_date=work_date, session=session):
            raise ConflictError(
                f"Already checked in for the {session.value} session on {work_date:%Y-%m-%d}",
                code=ErrorCode.ALREADY_CHECKED_IN,
            )

        record = self._timesheets.create_checkin(
            student_id=student_id,
            work_date=work_date,
            session=session,
            check_in_time=check_in_at,
            late_minutes=self._scheduler.calculate_late_minutes(clock_time, session, schedule),
            location_verified=True,
            check_in_method=CheckInMethod.GPS,
            location_lat=location.lat,
            location_lng=location.lng,
            remarks=remarks.strip() if remarks else None,
        )
        logger.info("Student %s checked in (%s %s, late %d min)", student_id, work_date, session.value, record.late_minutes)

        self._recorder.record(
            LocationSample.from_position(
                student_id=student_id,
                position=location,
                timestamp=check_in_at,
                session_record_id=record.record_id,
            )
        )
        return record

    def check_out(
        self,
        student_id: str,
        work_date: date,
        session: SessionType,
        clock_time: time,
        *,
        remarks: Optional[str] = None,
    ) -> SessionRecord:
        record = self._timesheets.get_for_key(student_id=student_id, work_date=work_date, session=session)
        if record is None or record.check_in_time is None:
            raise NotFoundError(
                f"No active {session.value} session found for {work_date:%Y-%m-%d}",
                code=ErrorCode.NO_ACTIVE_SESSION,
            )
        if record.check_out_time is not None:
            raise ConflictError(
                f"Already checked out of the {session.value} session", code=ErrorCode.ALREADY_CHECKED_OUT
            )

        check_out_at = datetime.combine(work_date, clock_time)
        if check_out_at <= record.check_in_time:
            raise ValidationError(
                f"Check-out time {clock_time:%H:%M:%S} must be later than check-in time "
                f"{record.check_in_time:%H:%M:%S}",
                code=ErrorCode.BAD_SEQUENCE,
            )

        hours = (check_out_at - record.check_in_time).total_seconds() / 3600
        total_hours = round(max(0.0, hours), 2)
        is_verified = total_hours > 0
        new_remarks = remarks.strip() if remarks else record.remarks

        updated = self._timesheets.update_checkout(
            record_id=record.record_id,
            check_out_time=check_out_at,
            total_hours=total_hours,
            is_verified=is_verified,
            remarks=new_remarks,
        )
        if not updated:
            # Lost a race with another check-out for the same record.
            raise ConflictError(
                f"Already checked out of the {session.value} session", code=ErrorCode.ALREADY_CHECKED_OUT
            )

        logger.info("Student %s checked out (%s %s, %.2f h)", student_id, work_date, session.value, total_hours)
        return SessionRecord(
            record_id=record.record_id,
            student_id=record.student_id,
            work_date=record.work_date,
            session=record.session,
            check_in_time=record.check_in_time,
            check_out_time=check_out_at,
            total_hours=total_hours,
            late_minutes=record.late_minutes,
            location_verified=record.location_verified,
            is_verified=is_verified,
            check_in_method=record.check_in_method,
            location_lat=record.location_lat,
            location_lng=record.location_lng,
            remarks=new_remarks,
        )

    def handle_clock_event(self, event: ClockEvent, *, schedule: Optional[ScheduleConfig] = None) -> SessionRecord:
        if event.action == ClockAction.CHECK_IN:
            if event.location is None:
                raise ValidationError("Location is required to clock in", code=ErrorCode.INVALID_INPUT)
            if schedule is None:
                raise ConfigError("No session schedule was resolved for this check-in", code=ErrorCode.INVALID_SCHEDULE)
            return self.check_in(
                event.student_id,
                event.work_date,
                event.session,
                event.time,
                event.location,
                schedule=schedule,
                remarks=event.remarks,
            )
        return self.check_out(event.student_id, event.work_date, event.session, event.time, remarks=event.remarks)

    def get_day(self, student_id: str, work_date: date) -> Sequence[SessionRecord]:
        records = self._timesheets.list_for_student_and_date(student_id, work_date)
        return sorted(records, key=lambda r: 0 if r.session == SessionType.MORNING else 1)
