from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInMethod, SessionType
from .model import SessionRecord, TimesheetReportRow


class TimesheetRepository(Protocol):
    def get_for_key(self, *, student_id: str, work_date: date, session: SessionType) -> Optional[SessionRecord]:
        raise NotImplementedError

    def list_for_student_and_date(self, student_id: str, work_date: date) -> Sequence[SessionRecord]:
        raise NotImplementedError

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
        location_lat: Optional[float] = None,
        location_lng: Optional[float] = None,
        remarks: Optional[str] = None,
    ) -> SessionRecord:
        """Insert a CHECKED_IN record.

        Must raise ConflictError(ALREADY_CHECKED_IN) when a record already
        exists for (student_id, work_date, session).
        """

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        total_hours: float,
        is_verified: bool,
        remarks: Optional[str] = None,
    ) -> bool:
        """Set check-out fields only if the record is not checked out yet.

        Returns False when nothing was updated.
        """

        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        company_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[TimesheetReportRow]:
        raise NotImplementedError
