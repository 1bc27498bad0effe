from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class SystemSettingsRepository(Protocol):
    def get_session_settings(self) -> Optional[Mapping[str, Any]]:
        """Raw session schedule columns, or None when nothing is configured.

        Keys: ``{morning,afternoon}_checkin_start``, ``..._checkin_end``,
        ``..._standard_start``. Values may be None.
        """

        raise NotImplementedError
