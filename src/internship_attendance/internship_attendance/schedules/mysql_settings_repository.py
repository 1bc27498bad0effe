from __future__ import annotations

from typing import Any, Mapping, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .repository import SystemSettingsRepository

SESSION_SETTING_COLUMNS = (
    "morning_checkin_start",
    "morning_checkin_end",
    "morning_standard_start",
    "afternoon_checkin_start",
    "afternoon_checkin_end",
    "afternoon_standard_start",
)


class MySQLSystemSettingsRepository(SystemSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session_settings(self) -> Optional[Mapping[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {", ".join(SESSION_SETTING_COLUMNS)}
                FROM system_settings
                ORDER BY settings_id
                LIMIT 1
                """
            )
            r = fetchone(cur)
            if not r:
                return None
            return {col: normalize_mysql_time(r.get(col)) for col in SESSION_SETTING_COLUMNS}
