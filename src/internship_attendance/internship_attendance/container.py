from __future__ import annotations

from dataclasses import dataclass

from .companies.mysql_company_repository import MySQLCompanyRepository
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .location.anti_spoofing import AntiSpoofingGuard
from .location.history import LocationHistoryRecorder
from .location.mysql_location_repository import MySQLLocationHistoryRepository
from .reports.service import AttendanceReportService
from .schedules.mysql_settings_repository import MySQLSystemSettingsRepository
from .schedules.service import ScheduleService, SessionScheduler
from .timesheets.mysql_timesheet_repository import MySQLTimesheetRepository
from .timesheets.service import TimesheetStateMachine


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    companies_repo: MySQLCompanyRepository
    settings_repo: MySQLSystemSettingsRepository
    timesheets_repo: MySQLTimesheetRepository
    location_repo: MySQLLocationHistoryRepository

    history_recorder: LocationHistoryRecorder
    schedule_service: ScheduleService
    timesheet_machine: TimesheetStateMachine
    report_service: AttendanceReportService


def build_container(
    *,
    db_config: dict,
    geofence_tolerance_meters: float = constants.GEOFENCE_TOLERANCE_METERS,
    max_speed_kmh: float = constants.DEFAULT_MAX_SPEED_KMH,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    companies_repo = MySQLCompanyRepository(conn)
    settings_repo = MySQLSystemSettingsRepository(conn)
    timesheets_repo = MySQLTimesheetRepository(conn)
    location_repo = MySQLLocationHistoryRepository(conn)

    history_recorder = LocationHistoryRecorder(location_repo)
    schedule_service = ScheduleService(settings_repo)
    timesheet_machine = TimesheetStateMachine(
        timesheets_repo,
        companies_repo,
        AntiSpoofingGuard(location_repo, max_speed_kmh=max_speed_kmh),
        history_recorder,
        scheduler=SessionScheduler(),
        geofence_tolerance_meters=geofence_tolerance_meters,
    )
    report_service = AttendanceReportService(timesheets_repo)

    return Container(
        conn=conn,
        companies_repo=companies_repo,
        settings_repo=settings_repo,
        timesheets_repo=timesheets_repo,
        location_repo=location_repo,
        history_recorder=history_recorder,
        schedule_service=schedule_service,
        timesheet_machine=timesheet_machine,
        report_service=report_service,
    )
