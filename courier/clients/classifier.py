"""
Response classification.

`classify_response` and `classify_transport_error` are pure: they map what the
transport produced to one outcome. `settle` is the single place where an
outcome turns into a return value or a raised error, and where its side
effects (one notice per failure, logout on auth loss) happen.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

import httpx

from ..exceptions import (
    AuthenticationError,
    RequestCancelledError,
    RequestFailedError,
    ValidationFailedError,
)
from ..models.envelopes import EnvelopedError, NoBody, parse_error_body
from ..notify import Notifier
from ..types import (
    AUTH_FAILED_MESSAGE,
    GENERIC_FALLBACK_MESSAGE,
    NETWORK_FALLBACK_MESSAGE,
    SUCCESS_CODE,
    SUCCESS_STATUSES,
    UNAUTHORIZED_CODE,
    UNPROCESSABLE_CODE,
    VALIDATION_FALLBACK_MESSAGE,
    ResponseType,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Outcomes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Success:
    body: Any


@dataclass(frozen=True, slots=True)
class PassThrough:
    response: httpx.Response


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    message: str
    body: Any
    field_errors: dict[str, list[str]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AuthFailure:
    message: str
    body: Any
    status_code: int | None = None


@dataclass(frozen=True, slots=True)
class GenericFailure:
    message: str
    body: Any
    status_code: int | None = None
    transport_error: Exception | None = None


@dataclass(frozen=True, slots=True)
class Cancelled:
    key: str


Outcome: TypeAlias = (
    Success | PassThrough | ValidationFailure | AuthFailure | GenericFailure | Cancelled
)


def decode_body(response: httpx.Response) -> Any:
    """JSON-decode a response body, falling back to text; empty bodies decode to None."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def _body_message(body: Any) -> str | None:
    parsed = parse_error_body(body)
    if isinstance(parsed, NoBody):
        return None
    return parsed.message or parsed.error


def _status_error(response: httpx.Response, message: str) -> httpx.HTTPStatusError | None:
    try:
        request = response.request
    except RuntimeError:
        return None
    return httpx.HTTPStatusError(message, request=request, response=response)


class ResponseClassifier:
    """
    Maps transport outcomes to `Outcome` values and settles them.

    Args:
        notifier: Receives exactly one notice per failed call.
        on_auth_failure: Called once per `AuthFailure` (typically the session's logout).
        success_code: Discriminator value that marks an enveloped success.
        auth_failure_code: Discriminator value that marks a lost session.
        discriminator: Envelope field carrying the code.
    """

    def __init__(
        self,
        *,
        notifier: Notifier,
        on_auth_failure: Callable[[], None] | None = None,
        success_code: int = SUCCESS_CODE,
        auth_failure_code: int = UNAUTHORIZED_CODE,
        discriminator: str = "code",
    ) -> None:
        self._notifier = notifier
        self._on_auth_failure = on_auth_failure
        self._success_code = success_code
        self._auth_failure_code = auth_failure_code
        self._discriminator = discriminator

    # =========================================================================
    # Classification (pure)
    # =========================================================================

    def classify_response(
        self, response: httpx.Response, *, response_type: ResponseType = "json"
    ) -> Outcome:
        if response_type == "blob":
            return PassThrough(response)

        status = response.status_code
        body = decode_body(response)
        if response.is_success:
            return self._classify_received(status, body)
        if status == UNAUTHORIZED_CODE:
            return AuthFailure(
                AUTH_FAILED_MESSAGE,
                body=body if body not in (None, "") else {"message": "Unauthorized"},
                status_code=status,
            )
        if status == UNPROCESSABLE_CODE:
            return self._validation_failure(body)

        transport_message = f"Request failed with status code {status}"
        status_error = _status_error(response, transport_message)
        return GenericFailure(
            _body_message(body) or transport_message,
            body=body if body is not None else status_error,
            status_code=status,
            transport_error=status_error,
        )

    def classify_transport_error(self, exc: Exception) -> Outcome:
        """Classify a failure that produced no response (connect, timeout, protocol)."""
        response = getattr(exc, "response", None)
        if isinstance(exc, httpx.HTTPStatusError) and response is not None:
            return self.classify_response(response)
        return GenericFailure(
            str(exc) or NETWORK_FALLBACK_MESSAGE,
            body=exc,
            transport_error=exc,
        )

    def _classify_received(self, status: int, body: Any) -> Outcome:
        if status in SUCCESS_STATUSES:
            if not isinstance(body, Mapping) or self._discriminator not in body:
                return Success(body)
            code = body[self._discriminator]
            if code == self._success_code:
                return Success(body)
            if code == self._auth_failure_code:
                return AuthFailure(AUTH_FAILED_MESSAGE, body=body, status_code=status)

        return GenericFailure(
            _body_message(body) or GENERIC_FALLBACK_MESSAGE, body=body, status_code=status
        )

    def _validation_failure(self, body: Any) -> ValidationFailure:
        parsed = parse_error_body(body)
        field_errors: dict[str, list[str]] = {}
        message: str | None = None
        if isinstance(parsed, EnvelopedError):
            field_errors = parsed.errors
            message = parsed.first_error() or parsed.message
        elif not isinstance(parsed, NoBody):
            message = parsed.message
        return ValidationFailure(
            message or VALIDATION_FALLBACK_MESSAGE,
            body=body,
            field_errors=field_errors,
        )

    # =========================================================================
    # Settlement (side effects)
    # =========================================================================

    def settle(self, outcome: Outcome) -> Any:
        """Return the caller-visible value for `outcome`, or raise its rejection."""
        if isinstance(outcome, Success):
            return outcome.body
        if isinstance(outcome, PassThrough):
            return outcome.response
        if isinstance(outcome, Cancelled):
            logger.debug("Request cancelled: %s", outcome.key)
            raise RequestCancelledError(outcome.key)

        self._notifier.error(outcome.message)
        if isinstance(outcome, AuthFailure):
            self._logout()
            raise AuthenticationError(
                outcome.message, body=outcome.body, status_code=outcome.status_code
            )
        if isinstance(outcome, ValidationFailure):
            raise ValidationFailedError(
                outcome.message, body=outcome.body, field_errors=outcome.field_errors
            )
        raise RequestFailedError(
            outcome.message,
            body=outcome.body,
            status_code=outcome.status_code,
            transport_error=outcome.transport_error,
        )

    def _logout(self) -> None:
        if self._on_auth_failure is None:
            return
        try:
            self._on_auth_failure()
        except Exception:
            logger.warning("Logout callback failed after authentication failure", exc_info=True)
