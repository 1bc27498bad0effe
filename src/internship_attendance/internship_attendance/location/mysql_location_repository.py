from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_optional_float, db_cursor, fetchone
from .model import LocationSample
from .repository import LocationHistoryRepository


class MySQLLocationHistoryRepository(LocationHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_latest_for_student(self, student_id: str) -> Optional[LocationSample]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sample_id, student_id, latitude, longitude, accuracy, altitude,
                       altitude_accuracy, heading, speed, recorded_at, timesheet_id
                FROM student_location_history
                WHERE student_id=%s
                ORDER BY recorded_at DESC, sample_id DESC
                LIMIT 1
                """,
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LocationSample(
                sample_id=int(r["sample_id"]),
                student_id=r["student_id"],
                lat=float(r["latitude"]),
                lng=float(r["longitude"]),
                timestamp=r["recorded_at"],
                session_record_id=int(r["timesheet_id"]) if r.get("timesheet_id") is not None else None,
                accuracy=as_optional_float(r.get("accuracy")),
                altitude=as_optional_float(r.get("altitude")),
                altitude_accuracy=as_optional_float(r.get("altitude_accuracy")),
                heading=as_optional_float(r.get("heading")),
                speed=as_optional_float(r.get("speed")),
            )

    def append(self, sample: LocationSample) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO student_location_history(
                    student_id, latitude, longitude, accuracy, altitude,
                    altitude_accuracy, heading, speed, recorded_at, timesheet_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    sample.student_id,
                    sample.lat,
                    sample.lng,
                    sample.accuracy,
                    sample.altitude,
                    sample.altitude_accuracy,
                    sample.heading,
                    sample.speed,
                    sample.timestamp,
                    sample.session_record_id,
                ),
            )
            return int(cur.lastrowid)
