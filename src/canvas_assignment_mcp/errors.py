"""Error classes and helpers for the Canvas Assignment MCP Server.

Defines structured exceptions for the server's error model and a function
to convert exceptions to serializable error payloads. Messages carried by
these errors are safe to show to end users: raw API response bodies and
credentials are kept out of them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, TypedDict

GENERIC_FAILURE_MESSAGE = "An error occurred while processing your request."


class ErrorPayload(TypedDict, total=False):
    code: str
    message: str
    details: Dict[str, Any]


@dataclass
class AppError(Exception):
    """Base application error with a code and optional details."""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        return self.message

    def to_payload(self) -> ErrorPayload:
        payload: ErrorPayload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    """Raised when caller input is malformed. Never reaches the remote API."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("VALIDATION_ERROR", message, details)


class RemoteError(AppError):
    """Raised when the Canvas API answers with a non-success status.

    `status` is None when no response was received at all (connection
    failures). `body` keeps the raw response text for logging only; it is
    never part of `message` or the payload.
    """

    def __init__(
        self,
        status: Optional[int],
        body: str = "",
        details: Optional[Dict[str, Any]] = None,
        message: Optional[str] = None,
    ) -> None:
        if message is None and status is None:
            message = "Could not reach the Canvas API."
        elif message is None:
            message = f"Canvas API returned HTTP {status}."
        super().__init__("REMOTE_ERROR", message, details)
        self.status = status
        self.body = body


class TimeoutErrorApp(AppError):
    """Raised when a request exceeds its allowed time budget."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("TIMEOUT", message, details)


class ParseError(AppError):
    """Raised when a date string must be parsed strictly and cannot be."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("PARSE_ERROR", message, details)


class ConfigurationError(AppError):
    """Raised when the Canvas token or domain is missing or invalid."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__("CONFIG_ERROR", message, details)


def to_error_payload(error: Exception) -> ErrorPayload:
    """Convert an exception into a structured error payload.

    Args:
        error: The exception to convert.

    Returns:
        A dictionary with `code`, `message` and optional `details`. Errors
        that are not `AppError`s are reported with a fixed generic message
        so internal details never leak.

    Examples:
        >>> try:
        ...     raise RemoteError(404, "<html>not found</html>", {"course_id": "1"})
        ... except Exception as e:
        ...     payload = to_error_payload(e)
        ...     assert payload["code"] == "REMOTE_ERROR"
        ...     assert "html" not in payload["message"]
    """

    if isinstance(error, AppError):
        return error.to_payload()
    return {"code": "INTERNAL_ERROR", "message": GENERIC_FAILURE_MESSAGE}
