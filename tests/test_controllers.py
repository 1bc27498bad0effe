from __future__ import annotations

import pytest
from flask import Flask

from src.internship_attendance.internship_attendance.container import Container
from src.internship_attendance.internship_attendance.location.anti_spoofing import AntiSpoofingGuard
from src.internship_attendance.internship_attendance.location.history import LocationHistoryRecorder
from src.internship_attendance.internship_attendance.reports.controller import register as register_reports
from src.internship_attendance.internship_attendance.reports.service import AttendanceReportService
from src.internship_attendance.internship_attendance.schedules.service import ScheduleService
from src.internship_attendance.internship_attendance.timesheets.controller import register as register_timesheets
from src.internship_attendance.internship_attendance.timesheets.service import TimesheetStateMachine
from tests.fakes import (
    InMemoryCompanies,
    InMemoryLocationHistory,
    InMemorySettings,
    InMemoryTimesheets,
    InlineExecutor,
    east_of_origin,
)

AT_OFFICE = {"lat": 0.0, "lng": east_of_origin(50), "accuracy": 12.0}


@pytest.fixture
def client(company):
    timesheets = InMemoryTimesheets()
    timesheets.add_student("s1", full_name="Alice Reyes", company_id=1, student_number="2021-001")
    history = InMemoryLocationHistory()
    companies = InMemoryCompanies({"s1": company})
    settings = InMemorySettings(None)
    recorder = LocationHistoryRecorder(history, executor=InlineExecutor())

    container = Container(
        conn=None,
        companies_repo=companies,
        settings_repo=settings,
        timesheets_repo=timesheets,
        location_repo=history,
        history_recorder=recorder,
        schedule_service=ScheduleService(settings),
        timesheet_machine=TimesheetStateMachine(timesheets, companies, AntiSpoofingGuard(history), recorder),
        report_service=AttendanceReportService(timesheets),
    )

    app = Flask(__name__)
    register_timesheets(app, container)
    register_reports(app, container)
    return app.test_client()


def _event(action, time, *, session="morning", student_id="s1", location=AT_OFFICE, remarks=None):
    body = {"student_id": student_id, "date": "2026-03-02", "session": session, "action": action, "time": time}
    if remarks is not None:
        body["remarks"] = remarks
    if location is not None:
        body["location"] = location
    return body


def test_clock_in_and_out(client):
    res = client.post("/api/clock-event", json=_event("check_in", "08:10"))
    assert res.status_code == 200
    body = res.get_json()
    assert body["success"] is True
    assert body["data"]["state"] == "CHECKED_IN"
    assert body["data"]["late_minutes"] == 10
    assert body["signal"]["confidence"] == "high"

    res = client.post("/api/clock-event", json=_event("check_out", "12:10", location=None))
    assert res.status_code == 200
    assert res.get_json()["data"]["total_hours"] == 4.0

    res = client.get("/api/students/s1/timesheets?date=2026-03-02")
    [record] = res.get_json()["data"]
    assert record["state"] == "CHECKED_OUT"


def test_malformed_body_is_400(client):
    res = client.post("/api/clock-event", json={"session": "evening", "action": "check_in"})
    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidInput"


def test_check_in_without_location_is_400(client):
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", location=None))
    assert res.status_code == 400


def test_outside_window_is_400_with_code(client):
    res = client.post("/api/clock-event", json=_event("check_in", "07:00"))
    assert res.status_code == 400
    assert res.get_json()["error"] == "OutsideWindow"


def test_check_out_without_check_in_is_404(client):
    res = client.post("/api/clock-event", json=_event("check_out", "12:00", location=None))
    assert res.status_code == 404
    assert res.get_json()["error"] == "NoActiveSession"


def test_duplicate_check_in_is_409(client):
    client.post("/api/clock-event", json=_event("check_in", "08:00"))
    res = client.post("/api/clock-event", json=_event("check_in", "08:05"))
    assert res.status_code == 409
    assert res.get_json()["error"] == "AlreadyCheckedIn"


def test_unassigned_student_is_422(client):
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", student_id="nobody"))
    assert res.status_code == 422
    assert res.get_json()["error"] == "NoCompany"


def test_daily_attendance_report(client):
    client.post("/api/clock-event", json=_event("check_in", "08:00"))
    client.post("/api/clock-event", json=_event("check_out", "12:00", location=None))

    res = client.get("/api/daily-attendance?start_date=2026-03-02")

    assert res.status_code == 200
    body = res.get_json()
    [day] = body["attendance"]
    assert day["full_name"] == "Alice Reyes"
    assert day["morning_check_in"] == "08:00:00"
    assert day["afternoon_check_in"] is None
    assert day["status"] == "half_day"
    assert body["summary"]["total_records"] == 1


def test_bad_date_range_is_400(client):
    res = client.get("/api/daily-attendance?start_date=2026-03-03&end_date=2026-03-02")
    assert res.status_code == 400


def test_csv_export(client):
    client.post("/api/clock-event", json=_event("check_in", "08:00"))

    res = client.get("/api/daily-attendance.csv?company_id=1&start_date=2026-03-02&end_date=2026-03-02")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "attendance_1_20260302_20260302.csv" in res.headers["Content-Disposition"]
    text = res.data.decode("utf-8-sig")
    header, row = text.strip().splitlines()
    assert header.startswith("date,student_id,student_number,full_name")
    assert "Alice Reyes" in row
    assert "N/A" in row


def test_csv_export_requires_company(client):
    res = client.get("/api/daily-attendance.csv")
    assert res.status_code == 400


def test_clock_event_reports_fallback_schedule(client):
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", remarks="  On site  "))
    body = res.get_json()
    assert body["schedule_fallback"] is True
    assert body["data"]["remarks"] == "On site"


@pytest.mark.parametrize("remarks", [123, ["late"], {"note": "x"}])
def test_non_string_remarks_is_400(client, remarks):
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", remarks=remarks))
    assert res.status_code == 400
    assert res.get_json()["message"] == "remarks must be a string"


def test_out_of_range_position_timestamp_is_400(client):
    location = dict(AT_OFFICE, timestamp=10**20)
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", location=location))
    assert res.status_code == 400
    assert res.get_json()["error"] == "InvalidInput"


def test_utc_designator_in_position_timestamp_is_accepted(client):
    location = dict(AT_OFFICE, timestamp="2026-03-02T00:00:00Z")
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", location=location))
    assert res.status_code == 200


@pytest.mark.parametrize("value", ["nan", "inf", "-inf"])
def test_non_finite_accuracy_is_400(client, value):
    location = dict(AT_OFFICE, accuracy=value)
    res = client.post("/api/clock-event", json=_event("check_in", "08:00", location=location))
    assert res.status_code == 400
    assert res.get_json()["message"] == "location.accuracy must be a finite number"
