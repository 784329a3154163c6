"""
Client configuration.

Configuration is a frozen value object passed to `RequestClient`. It can be
built explicitly or from `COURIER_*` environment variables.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from .exceptions import ConfigurationError
from .types import CONTENT_TYPE_JSON, REQUEST_TIMEOUT_SECONDS, SUCCESS_CODE, UNAUTHORIZED_CODE

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    Settings shared by every call made through one client.

    Attributes:
        base_url: Prefix joined to every request path by the transport.
        timeout: Transport timeout in seconds. The pipeline itself never times out.
        default_content_type: Content-Type applied when a call sets none.
        success_code: Envelope discriminator value that marks a success.
        auth_failure_code: Envelope discriminator value that marks a lost session.
        discriminator: Name of the envelope discriminator field.
        anonymous_paths: Path fragments that never receive the bearer header.
        use_mock: Strip the `/mock` routing segment from cancellation keys.
        transform_request_data: Convert plain mappings to multipart form fields.
        transport: Optional transport override (e.g. `httpx.MockTransport`).
    """

    base_url: str = ""
    timeout: float = REQUEST_TIMEOUT_SECONDS
    default_content_type: str = CONTENT_TYPE_JSON
    success_code: int = SUCCESS_CODE
    auth_failure_code: int = UNAUTHORIZED_CODE
    discriminator: str = "code"
    anonymous_paths: tuple[str, ...] = ("/login",)
    use_mock: bool = False
    transform_request_data: bool = True
    transport: httpx.AsyncBaseTransport | None = None

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout!r}")
        if not self.discriminator:
            raise ConfigurationError("discriminator must be a non-empty field name")

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> ClientConfig:
        """
        Build a config from `COURIER_*` variables.

        Reads `COURIER_BASE_URL`, `COURIER_TIMEOUT`, `COURIER_USE_MOCK` and
        `COURIER_SUCCESS_CODE`; unset variables keep their defaults.
        """
        source = os.environ if env is None else env
        base_url = source.get("COURIER_BASE_URL", "")
        timeout = _parse_float(source, "COURIER_TIMEOUT", REQUEST_TIMEOUT_SECONDS)
        success_code = _parse_int(source, "COURIER_SUCCESS_CODE", SUCCESS_CODE)
        use_mock = _parse_bool(source, "COURIER_USE_MOCK", False)
        return cls(
            base_url=base_url,
            timeout=timeout,
            success_code=success_code,
            use_mock=use_mock,
            transport=transport,
        )


def _parse_float(source: Mapping[str, str], name: str, default: float) -> float:
    raw = source.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _parse_int(source: Mapping[str, str], name: str, default: int) -> int:
    raw = source.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_bool(source: Mapping[str, str], name: str, default: bool) -> bool:
    raw = source.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")
