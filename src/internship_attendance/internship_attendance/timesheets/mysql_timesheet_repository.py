from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.enums import CheckInMethod, ErrorCode, SessionType
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_float, db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import SessionRecord, TimesheetReportRow
from .repository import TimesheetRepository

_RECORD_COLUMNS = """
    t.record_id, t.student_id, t.work_date, t.session, t.check_in_time, t.check_out_time,
    t.total_hours, t.late_minutes, t.location_verified, t.is_verified, t.check_in_method,
    t.location_lat, t.location_lng, t.remarks
"""


def _to_record(r: Dict[str, Any]) -> SessionRecord:
    return SessionRecord(
        record_id=int(r["record_id"]),
        student_id=r["student_id"],
        work_date=normalize_mysql_date(r["work_date"]),
        session=SessionType(r["session"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        total_hours=float(r.get("total_hours") or 0),
        late_minutes=int(r.get("late_minutes") or 0),
        location_verified=bool(r.get("location_verified")),
        is_verified=bool(r.get("is_verified")),
        check_in_method=CheckInMethod(r.get("check_in_method") or CheckInMethod.GPS.value),
        location_lat=as_optional_float(r.get("location_lat")),
        location_lng=as_optional_float(r.get("location_lng")),
        remarks=r.get("remarks"),
    )


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_key(self, *, student_id: str, work_date: date, session: SessionType) -> Optional[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM timesheets t
                WHERE t.student_id=%s AND t.work_date=%s AND t.session=%s
                """,
                (student_id, work_date, session.value),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_student_and_date(self, student_id: str, work_date: date) -> Sequence[SessionRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM timesheets t
                WHERE t.student_id=%s AND t.work_date=%s
                ORDER BY t.session ASC
                """,
                (student_id, work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO timesheets(
                        student_id, work_date, session, check_in_time, late_minutes,
                        location_verified, check_in_method, location_lat, location_lng, remarks
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        student_id,
                        work_date,
                        session.value,
                        check_in_time,
                        int(late_minutes),
                        int(bool(location_verified)),
                        check_in_method.value,
                        location_lat,
                        location_lng,
                        remarks,
                    ),
                )
                record_id = int(cur.lastrowid)
        except IntegrityError as e:
            # The unique index on (student_id, work_date, session) settles concurrent check-ins.
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError(
                    f"Already checked in for the {session.value} session", code=ErrorCode.ALREADY_CHECKED_IN
                ) from e
            raise

        return SessionRecord(
            record_id=record_id,
            student_id=student_id,
            work_date=work_date,
            session=session,
            check_in_time=check_in_time,
            late_minutes=int(late_minutes),
            location_verified=bool(location_verified),
            check_in_method=check_in_method,
            location_lat=location_lat,
            location_lng=location_lng,
            remarks=remarks,
        )

    def update_checkout(
        self,
        *,
        record_id: int,
        check_out_time: datetime,
        total_hours: float,
        is_verified: bool,
        remarks: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timesheets
                SET check_out_time=%s, total_hours=%s, is_verified=%s, remarks=%s
                WHERE record_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, float(total_hours), int(bool(is_verified)), remarks, int(record_id)),
            )
            return cur.rowcount > 0

    def get_report_rows(
        self,
        *,
        company_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[TimesheetReportRow]:
        clauses: list[str] = []
        params: list[object] = []

        if company_id is not None:
            clauses.append("s.company_id=%s")
            params.append(int(company_id))
        if student_id is not None:
            clauses.append("t.student_id=%s")
            params.append(student_id)
        if start_date is not None:
            clauses.append("t.work_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("t.work_date<=%s")
            params.append(end_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS},
                    s.full_name, s.student_number, s.course, s.company_id
                FROM timesheets t
                JOIN students s ON s.student_id = t.student_id
                {where}
                ORDER BY t.work_date DESC, s.full_name ASC, t.session ASC
                """,
                tuple(params),
            )
            return [
                TimesheetReportRow(
                    record=_to_record(r),
                    full_name=r["full_name"],
                    student_number=r.get("student_number"),
                    course=r.get("course"),
                    company_id=int(r["company_id"]) if r.get("company_id") is not None else None,
                )
                for r in fetchall(cur)
            ]
