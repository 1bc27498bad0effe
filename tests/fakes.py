from __future__ import annotations

import math
from concurrent.futures import Executor, Future
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

from src.internship_attendance.internship_attendance.companies.model import Company
from src.internship_attendance.internship_attendance.core.constants import EARTH_RADIUS_METERS
from src.internship_attendance.internship_attendance.core.enums import CheckInMethod, ErrorCode, SessionType
from src.internship_attendance.internship_attendance.core.exceptions import ConflictError
from src.internship_attendance.internship_attendance.location.model import LocationSample
from src.internship_attendance.internship_attendance.timesheets.model import SessionRecord, TimesheetReportRow


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class InMemoryCompanies:
    def __init__(self, by_student: Optional[dict[str, Company]] = None):
        self._by_student = by_student or {}

    def get_for_student(self, student_id: str) -> Optional[Company]:
        return self._by_student.get(student_id)


class InMemoryLocationHistory:
    def __init__(self, samples: Optional[list[LocationSample]] = None, *, fail_on_append: bool = False):
        self.samples: list[LocationSample] = list(samples or [])
        self.fail_on_append = fail_on_append

    def get_latest_for_student(self, student_id: str) -> Optional[LocationSample]:
        own = [s for s in self.samples if s.student_id == student_id]
        if not own:
            return None
        return max(own, key=lambda s: s.timestamp)

    def append(self, sample: LocationSample) -> int:
        if self.fail_on_append:
            raise RuntimeError("history table unavailable")
        sample = replace(sample, sample_id=len(self.samples) + 1)
        self.samples.append(sample)
        return sample.sample_id


class InMemorySettings:
    def __init__(self, raw: Optional[dict] = None):
        self._raw = raw

    def get_session_settings(self):
        return self._raw


class InMemoryTimesheets:
    def __init__(self):
        self._by_key: dict[tuple[str, date, SessionType], SessionRecord] = {}
        self._identity: dict[str, dict] = {}
        self._id = 0

    def add_student(self, student_id: str, *, full_name: str, company_id: int, student_number: str = "", course: str = ""):
        self._identity[student_id] = {
            "full_name": full_name,
            "company_id": company_id,
            "student_number": student_number,
            "course": course,
        }

    def get_for_key(self, *, student_id: str, work_date: date, session: SessionType) -> Optional[SessionRecord]:
        return self._by_key.get((student_id, work_date, session))

    def list_for_student_and_date(self, student_id: str, work_date: date):
        return [r for (sid, d, _), r in self._by_key.items() if sid == student_id and d == work_date]

    def create_checkin(
        self,
        *,
        student_id: str,
        work_date: date,
        session: SessionType,
        check_in_time: datetime,
        late_minutes: int,
        location_verified: bool,
        check_in_method: CheckInMethod,
        location_lat=None,
        location_lng=None,
        remarks=None,
    ) -> SessionRecord:
        key = (student_id, work_date, session)
        if key in self._by_key:
            raise ConflictError("duplicate key", code=ErrorCode.ALREADY_CHECKED_IN)
        self._id += 1
        rec = SessionRecord(
            record_id=self._id,
            student_id=student_id,
            work_date=work_date,
            session=session,
            check_in_time=check_in_time,
            late_minutes=late_minutes,
            location_verified=location_verified,
            check_in_method=check_in_method,
            location_lat=location_lat,
            location_lng=location_lng,
            remarks=remarks,
        )
        self._by_key[key] = rec
        return rec

    def update_checkout(self, *, record_id: int, check_out_time: datetime, total_hours: float, is_verified: bool, remarks=None) -> bool:
        for key, rec in self._by_key.items():
            if rec.record_id == record_id and rec.check_out_time is None:
                self._by_key[key] = replace(
                    rec,
                    check_out_time=check_out_time,
                    total_hours=total_hours,
                    is_verified=is_verified,
                    remarks=remarks,
                )
                return True
        return False

    def get_report_rows(self, *, company_id=None, start_date=None, end_date=None, student_id=None):
        rows = []
        for rec in self._by_key.values():
            identity = self._identity.get(rec.student_id, {"full_name": rec.student_id, "company_id": None})
            if company_id is not None and identity.get("company_id") != company_id:
                continue
            if student_id is not None and rec.student_id != student_id:
                continue
            if start_date is not None and rec.work_date < start_date:
                continue
            if end_date is not None and rec.work_date > end_date:
                continue
            rows.append(
                TimesheetReportRow(
                    record=rec,
                    full_name=identity["full_name"],
                    student_number=identity.get("student_number"),
                    course=identity.get("course"),
                    company_id=identity.get("company_id"),
                )
            )
        return rows


def east_of_origin(meters: float) -> float:
    """Longitude that lies `meters` east of (0, 0) along the equator."""
    return math.degrees(meters / EARTH_RADIUS_METERS)
