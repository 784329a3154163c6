"""
Exception hierarchy raised by the request pipeline.

Every rejection carries the backend's error body verbatim in ``body`` (or the
raw transport error when no response was received), so callers can branch on
the payload shape rather than on the exception class alone.
"""

from __future__ import annotations

from typing import Any


class CourierError(Exception):
    """Base class for all courier errors."""

    def __init__(self, message: str, *, body: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.body = body

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CourierError):
    """Invalid client configuration."""


class RequestCancelledError(CourierError):
    """
    The call was cancelled through `cancel_request()` / `cancel_all_requests()`.

    Cancellation is silent: no notice is emitted for it.
    """

    def __init__(self, key: str) -> None:
        super().__init__(f"Request cancelled: {key}")
        self.key = key


class AuthenticationError(CourierError):
    """HTTP 401 (or a 2xx envelope carrying the auth-failure code)."""

    def __init__(self, message: str, *, body: Any = None, status_code: int | None = None) -> None:
        super().__init__(message, body=body)
        self.status_code = status_code


class ValidationFailedError(CourierError):
    """HTTP 422 with a field-error mapping."""

    def __init__(
        self,
        message: str,
        *,
        body: Any = None,
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message, body=body)
        self.field_errors = field_errors or {}
        self.status_code = 422


class RequestFailedError(CourierError):
    """Any other failure, with or without a response."""

    def __init__(
        self,
        message: str,
        *,
        body: Any = None,
        status_code: int | None = None,
        transport_error: Exception | None = None,
    ) -> None:
        super().__init__(message, body=body)
        self.status_code = status_code
        self.transport_error = transport_error
