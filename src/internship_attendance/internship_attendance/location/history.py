from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from typing import Optional

from .model import LocationSample
from .repository import LocationHistoryRepository

logger = logging.getLogger(__name__)


class LocationHistoryRecorder:
    """Detached writer for location history.

    Each sample is written on a worker thread through the repository's own
    short-lived connection, so it commits independently of the check-in and
    can never fail it. Write errors are logged and reported as a False result.
    """

    def __init__(self, history: LocationHistoryRepository, *, executor: Optional[Executor] = None):
        self._history = history
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="location-history")
        self._pending: set[Future] = set()
        self._lock = threading.Lock()

    def record(self, sample: LocationSample) -> Future:
        future = self._executor.submit(self._write, sample)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def drain(self, timeout: Optional[float] = None) -> None:
        """Block until every queued write has finished."""
        with self._lock:
            pending = list(self._pending)
        if pending:
            wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _forget(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _write(self, sample: LocationSample) -> bool:
        try:
            self._history.append(sample)
        except Exception:
            logger.exception(
                "Failed to store location history for student %s (record %s)",
                sample.student_id,
                sample.session_record_id,
            )
            return False
        return True
