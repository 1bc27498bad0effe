from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.responses import domain_error_response, server_error_response
from ..common.validators import (
    optional_float,
    optional_str,
    require_coordinate,
    require_date,
    require_non_empty,
    require_time,
)
from ..container import Container
from ..core.enums import ClockAction, ErrorCode, SessionType
from ..core.exceptions import DomainError, ValidationError
from ..location.anti_spoofing import assess_signal
from ..location.model import DevicePosition
from .model import ClockEvent

logger = logging.getLogger(__name__)


def _parse_position_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            # Browser geolocation timestamps are epoch milliseconds.
            return datetime.fromtimestamp(float(value) / 1000)
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    except (ValueError, OverflowError, OSError):
        raise ValidationError("location.timestamp is not a valid timestamp") from None


def parse_location(data: Any) -> Optional[DevicePosition]:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ValidationError("location must be an object")

    return DevicePosition(
        lat=require_coordinate(data.get("lat", data.get("latitude")), "location.lat", limit=90),
        lng=require_coordinate(data.get("lng", data.get("longitude")), "location.lng", limit=180),
        accuracy=optional_float(data.get("accuracy"), "location.accuracy"),
        altitude=optional_float(data.get("altitude"), "location.altitude"),
        altitude_accuracy=optional_float(data.get("altitude_accuracy"), "location.altitude_accuracy"),
        heading=optional_float(data.get("heading"), "location.heading"),
        speed=optional_float(data.get("speed"), "location.speed"),
        timestamp=_parse_position_timestamp(data.get("timestamp")),
    )


def parse_clock_event(data: Any) -> ClockEvent:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    try:
        session = SessionType(str(data.get("session", "")).lower())
    except ValueError:
        raise ValidationError("session must be 'morning' or 'afternoon'") from None
    try:
        action = ClockAction(str(data.get("action", "")).lower())
    except ValueError:
        raise ValidationError("action must be 'check_in' or 'check_out'") from None

    location = parse_location(data.get("location"))
    if action == ClockAction.CHECK_IN and location is None:
        raise ValidationError("Location is required to clock in", code=ErrorCode.INVALID_INPUT)

    return ClockEvent(
        student_id=require_non_empty(data.get("student_id"), "student_id"),
        work_date=require_date(data.get("date"), "date"),
        session=session,
        action=action,
        time=require_time(data.get("time"), "time"),
        location=location,
        remarks=optional_str(data.get("remarks"), "remarks"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clock-event", methods=["POST"], endpoint="api_clock_event")
    def api_clock_event():
        try:
            event = parse_clock_event(request.get_json(silent=True))

            signal = None
            if event.location is not None:
                signal = assess_signal(event.location)
                if not signal.valid:
                    logger.warning("Suspicious GPS signal from student %s: %s", event.student_id, "; ".join(signal.indicators))

            schedule = container.schedule_service.load_snapshot() if event.action == ClockAction.CHECK_IN else None
            record = container.timesheet_machine.handle_clock_event(event, schedule=schedule)

            body = {"success": True, "data": record.to_dict()}
            if signal is not None:
                body["signal"] = signal.to_dict()
            if schedule is not None:
                body["schedule_fallback"] = schedule.is_fallback
            return jsonify(body), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Unexpected error while handling clock event")
            return server_error_response("System error while recording attendance")

    @app.route("/api/students/<student_id>/timesheets", methods=["GET"], endpoint="api_student_timesheets")
    def api_student_timesheets(student_id: str):
        try:
            work_date = require_date(request.args.get("date") or datetime.now().strftime("%Y-%m-%d"), "date")
            records = container.timesheet_machine.get_day(student_id, work_date)
            return jsonify({"success": True, "data": [r.to_dict() for r in records]}), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Unexpected error while loading timesheets for %s", student_id)
            return server_error_response("System error while loading attendance")
