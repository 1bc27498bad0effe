from __future__ import annotations

from typing import Optional, Protocol

from .model import LocationSample


class LocationHistoryRepository(Protocol):
    def get_latest_for_student(self, student_id: str) -> Optional[LocationSample]:
        raise NotImplementedError

    def append(self, sample: LocationSample) -> int:
        """Insert a sample in its own transaction. Returns sample_id."""

        raise NotImplementedError
