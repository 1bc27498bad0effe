from __future__ import annotations

import logging
from datetime import datetime

from src.internship_attendance.internship_attendance.location.history import LocationHistoryRecorder
from src.internship_attendance.internship_attendance.location.model import LocationSample
from tests.fakes import InMemoryLocationHistory, InlineExecutor

SAMPLE = LocationSample(student_id="s1", lat=1.0, lng=2.0, timestamp=datetime(2026, 3, 2, 8, 0), session_record_id=7)


def test_record_appends_sample():
    history = InMemoryLocationHistory()
    recorder = LocationHistoryRecorder(history, executor=InlineExecutor())

    assert recorder.record(SAMPLE).result() is True
    assert history.samples[0].session_record_id == 7


def test_write_failure_is_logged_not_raised(caplog):
    recorder = LocationHistoryRecorder(InMemoryLocationHistory(fail_on_append=True), executor=InlineExecutor())

    with caplog.at_level(logging.ERROR):
        future = recorder.record(SAMPLE)

    assert future.result() is False
    assert "Failed to store location history for student s1" in caplog.text


def test_background_writes_can_be_drained():
    history = InMemoryLocationHistory()
    recorder = LocationHistoryRecorder(history)
    try:
        for _ in range(3):
            recorder.record(SAMPLE)
        recorder.drain(timeout=5)
        assert len(history.samples) == 3
    finally:
        recorder.shutdown()
