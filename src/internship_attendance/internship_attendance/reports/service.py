from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError
from ..timesheets.repository import TimesheetRepository
from .consolidator import AttendanceConsolidator, AttendanceSummary, DailyAttendanceProjection, summarize

EXPORT_FIELDS = [
    "date",
    "student_id",
    "student_number",
    "full_name",
    "course",
    "morning_check_in",
    "morning_check_out",
    "total_morning_hours",
    "afternoon_check_in",
    "afternoon_check_out",
    "total_afternoon_hours",
    "total_hours",
    "status",
    "verified",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: AttendanceSummary


class AttendanceReportService:
    def __init__(
        self,
        timesheets: TimesheetRepository,
        *,
        consolidator: Optional[AttendanceConsolidator] = None,
    ):
        self._timesheets = timesheets
        self._consolidator = consolidator or AttendanceConsolidator()

    def daily_attendance(
        self,
        *,
        company_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[str] = None,
    ) -> list[DailyAttendanceProjection]:
        # A start date on its own selects that single day.
        if start_date is not None and end_date is None:
            end_date = start_date
        if start_date is not None and end_date is not None and end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        rows = self._timesheets.get_report_rows(
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            student_id=student_id,
        )
        return self._consolidator.consolidate(rows)

    def build_daily_report(
        self,
        *,
        company_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[str] = None,
    ) -> ReportData:
        projections = self.daily_attendance(
            company_id=company_id,
            start_date=start_date,
            end_date=end_date,
            student_id=student_id,
        )

        out_rows: list[dict] = []
        for p in projections:
            d = p.to_dict()
            out_rows.append(
                {
                    "date": d["date"],
                    "student_id": p.student_id,
                    "student_number": p.student_number or "",
                    "full_name": p.full_name or "",
                    "course": p.course or "",
                    "morning_check_in": d["morning_check_in"] or "N/A",
                    "morning_check_out": d["morning_check_out"] or "N/A",
                    "total_morning_hours": p.total_morning_hours,
                    "afternoon_check_in": d["afternoon_check_in"] or "N/A",
                    "afternoon_check_out": d["afternoon_check_out"] or "N/A",
                    "total_afternoon_hours": p.total_afternoon_hours,
                    "total_hours": p.total_hours,
                    "status": p.status.value,
                    "verified": "Yes" if p.is_verified else "No",
                }
            )

        return ReportData(rows=out_rows, summary=summarize(projections))
