from __future__ import annotations

from .enums import ErrorCode


class DomainError(Exception):
    """Base exception for business rule violations."""

    default_code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        super().__init__(message)
        self.code = code or self.default_code


class ConfigError(DomainError):
    """Raised when company or schedule setup is missing or broken."""

    default_code = ErrorCode.MISSING_GEOFENCE


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConflictError(DomainError):
    """Raised when a session transition was already performed."""

    default_code = ErrorCode.ALREADY_CHECKED_IN


class NotFoundError(DomainError):
    """Raised when there is no session to act on."""

    default_code = ErrorCode.NO_ACTIVE_SESSION
