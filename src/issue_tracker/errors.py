"""Domain errors surfaced to API clients as structured error envelopes.

Every error carries a stable ``code`` and the HTTP status it maps to.  The
server layer converts these into ``{"success": false, "error": {...}}``
responses; nothing else needs to know about HTTP.
"""

from __future__ import annotations

from typing import Any, Optional


class TrackerError(Exception):
    """Base class for all expected failures."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, *, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class UnauthorizedError(TrackerError):
    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentialsError(TrackerError):
    code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Invalid email or password"


class ForbiddenError(TrackerError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(TrackerError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ValidationFailedError(TrackerError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Invalid request"


class DuplicateEmailError(TrackerError):
    code = "DUPLICATE_EMAIL"
    status_code = 400
    default_message = "Email already exists"


class InvalidTransitionError(TrackerError):
    code = "INVALID_TRANSITION"
    status_code = 400

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Cannot change status from {from_status} to {to_status}",
            details={"from": from_status, "to": to_status},
        )


class ConfigError(Exception):
    """Raised when a configuration file cannot be used."""
