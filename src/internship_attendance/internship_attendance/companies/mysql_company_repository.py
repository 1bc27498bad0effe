from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from ..core.enums import ErrorCode
from ..core.exceptions import ConfigError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Company, CompanyGeofence, parse_working_days
from .repository import CompanyRepository

logger = logging.getLogger(__name__)


def _to_geofence(r: Dict[str, Any]) -> Optional[CompanyGeofence]:
    lat, lng, radius = r.get("latitude"), r.get("longitude"), r.get("radius_meters")
    if lat is None or lng is None or not radius or float(radius) <= 0:
        return None
    return CompanyGeofence(center_lat=float(lat), center_lng=float(lng), radius_meters=float(radius))


class MySQLCompanyRepository(CompanyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student(self, student_id: str) -> Optional[Company]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT c.company_id, c.name, c.latitude, c.longitude, c.radius_meters, c.working_days
                FROM students s
                JOIN companies c ON c.company_id = s.company_id
                WHERE s.student_id=%s
                """,
                (student_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            try:
                working_days = parse_working_days(r.get("working_days"))
            except ValueError as e:
                logger.error("Company %s has invalid working_days %r", r["company_id"], r.get("working_days"))
                raise ConfigError(f"Company working days are misconfigured: {e}", code=ErrorCode.INVALID_SCHEDULE) from e

            return Company(
                company_id=int(r["company_id"]),
                name=r["name"],
                geofence=_to_geofence(r),
                working_days=working_days,
            )
