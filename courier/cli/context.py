from __future__ import annotations

import dataclasses
import logging
import sys
from contextlib import suppress
from dataclasses import dataclass, field
from typing import Any, Literal
from urllib.parse import urlsplit, urlunsplit

import httpx
from rich.console import Console

from courier import (
    AuthenticationError,
    ClientConfig,
    CourierError,
    RequestCancelledError,
    RequestClient,
    RequestFailedError,
    StaticAuthContext,
    ValidationFailedError,
)
from courier.exceptions import ConfigurationError
from courier.hooks import ErrorHook, RequestHook, ResponseHook
from courier.models.request import PreparedRequest

from .errors import EXIT_AUTH, EXIT_CANCELLED, EXIT_FAILURE, CLIError
from .results import ErrorInfo

OutputFormat = Literal["table", "json"]

logger = logging.getLogger(__name__)


def _strip_url_query_and_fragment(url: str) -> str:
    """
    Keep scheme/host/path but drop query/fragment to reduce accidental leakage of PII/filters.
    """
    try:
        parts = urlsplit(url)
        return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
    except ValueError:
        return url


class ConsoleNotifier:
    """Prints failure notices on stderr; silent in JSON mode, where the result carries them."""

    def __init__(self, *, enabled: bool) -> None:
        self._enabled = enabled
        self._stderr = Console(file=sys.stderr, force_terminal=False)
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)
        if self._enabled:
            self._stderr.print(f"Error: {message}", markup=False)


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    base_url: str | None
    token: str | None
    token_header: str
    timeout: float | None
    mock: bool
    trace: bool

    notifier: ConsoleNotifier | None = field(default=None, repr=False)

    def resolve_config(self) -> ClientConfig:
        try:
            config = ClientConfig.from_env()
            overrides: dict[str, Any] = {}
            if self.base_url:
                overrides["base_url"] = self.base_url
            if self.timeout is not None:
                overrides["timeout"] = self.timeout
            if self.mock:
                overrides["use_mock"] = True
            config = dataclasses.replace(config, **overrides)
        except ConfigurationError as exc:
            raise CLIError(str(exc)) from exc
        if not config.base_url:
            raise CLIError(
                "Missing base URL.", hint="Set COURIER_BASE_URL or pass --base-url."
            )
        return config

    def _trace_hooks(self) -> tuple[RequestHook | None, ResponseHook | None, ErrorHook | None]:
        if not self.trace:
            return None, None, None

        def _write(line: str) -> None:
            sys.stderr.write(line + "\n")
            with suppress(OSError):
                sys.stderr.flush()

        def _on_request(req: PreparedRequest) -> None:
            _write(f"trace -> {req.method} {_strip_url_query_and_fragment(req.path)}")

        def _on_response(res: httpx.Response) -> None:
            url = _strip_url_query_and_fragment(str(res.request.url))
            _write(f"trace <- {res.status_code} {url}")

        def _on_error(err: Exception) -> None:
            _write(f"trace !! {type(err).__name__}")

        return _on_request, _on_response, _on_error

    def build_client(self) -> RequestClient:
        config = self.resolve_config()
        self.notifier = ConsoleNotifier(enabled=self.output != "json")
        session = StaticAuthContext(
            token=self.token,
            header_name=self.token_header,
            on_logout=lambda: logger.info("Session token cleared after authentication failure"),
        )
        on_request, on_response, on_error = self._trace_hooks()
        return RequestClient(
            config,
            auth=session,
            notifier=self.notifier,
            on_request=on_request,
            on_response=on_response,
            on_error=on_error,
        )


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, AuthenticationError):
        return EXIT_AUTH
    if isinstance(exc, RequestCancelledError):
        return EXIT_CANCELLED
    return EXIT_FAILURE


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, ValidationFailedError):
        return ErrorInfo(
            type="validation_error",
            message=exc.message,
            status_code=exc.status_code,
            details=exc.body,
        )
    if isinstance(exc, AuthenticationError):
        return ErrorInfo(
            type="authentication_error",
            message=exc.message,
            status_code=exc.status_code,
            details=exc.body,
        )
    if isinstance(exc, RequestFailedError):
        # Raw transport errors are not JSON-serializable; only backend bodies are reported.
        details = None if exc.body is exc.transport_error else exc.body
        return ErrorInfo(
            type="request_failed",
            message=exc.message,
            status_code=exc.status_code,
            details=details,
        )
    if isinstance(exc, CourierError):
        return ErrorInfo(type=exc.__class__.__name__, message=exc.message)
    return ErrorInfo(type=exc.__class__.__name__, message=str(exc))
