from __future__ import annotations

from flask import jsonify

from ..core.exceptions import ConfigError, ConflictError, DomainError, NotFoundError, ValidationError

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ConflictError, 409),
    (ConfigError, 422),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def domain_error_response(error: DomainError):
    return jsonify({"success": False, "error": error.code.value, "message": str(error)}), status_for(error)


def server_error_response(message: str):
    return jsonify({"success": False, "error": "ServerError", "message": message}), 500
