from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request

from ..common.responses import domain_error_response, server_error_response
from ..common.validators import require_date
from ..container import Container
from ..core.exceptions import DomainError, ValidationError
from .consolidator import summarize
from .service import EXPORT_FIELDS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def _optional_date(name: str) -> Optional[date]:
        value = request.args.get(name)
        return require_date(value, name) if value else None

    def _company_id(*, required: bool) -> Optional[int]:
        value = request.args.get("company_id")
        if not value:
            if required:
                raise ValidationError("company_id is required")
            return None
        if not value.isdigit():
            raise ValidationError("company_id must be a number")
        return int(value)

    def _query(*, company_required: bool) -> dict:
        return {
            "company_id": _company_id(required=company_required),
            "start_date": _optional_date("start_date"),
            "end_date": _optional_date("end_date"),
            "student_id": request.args.get("student_id") or None,
        }

    @app.route("/api/daily-attendance", methods=["GET"], endpoint="api_daily_attendance")
    def api_daily_attendance():
        try:
            query = _query(company_required=False)
            projections = container.report_service.daily_attendance(**query)
            return jsonify(
                {
                    "attendance": [p.to_dict() for p in projections],
                    "summary": summarize(projections).to_dict(),
                }
            ), 200
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Unexpected error while loading daily attendance")
            return server_error_response("Failed to fetch attendance records")

    @app.route("/api/daily-attendance.csv", methods=["GET"], endpoint="api_daily_attendance_csv")
    def api_daily_attendance_csv():
        try:
            query = _query(company_required=True)
            data = container.report_service.build_daily_report(**query)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Unexpected error while exporting daily attendance")
            return server_error_response("Failed to export attendance records")

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        start = query["start_date"].strftime("%Y%m%d") if query["start_date"] else "all"
        end = query["end_date"].strftime("%Y%m%d") if query["end_date"] else "all"
        filename = f"attendance_{query['company_id']}_{start}_{end}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
