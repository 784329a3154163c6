from __future__ import annotations

import logging

import httpx
import pytest

from courier import ClientConfig, ConfigurationError, LoggingNotifier, StaticAuthContext
from courier.auth import is_anonymous_path


def test_defaults() -> None:
    config = ClientConfig()
    assert config.timeout == 60.0
    assert config.success_code == 0
    assert config.default_content_type == "application/json"
    assert config.anonymous_paths == ("/login",)
    assert config.use_mock is False


def test_from_env_reads_courier_variables() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200))
    config = ClientConfig.from_env(
        {
            "COURIER_BASE_URL": "https://api.example",
            "COURIER_TIMEOUT": "12.5",
            "COURIER_SUCCESS_CODE": "200",
            "COURIER_USE_MOCK": "yes",
        },
        transport=transport,
    )
    assert config.base_url == "https://api.example"
    assert config.timeout == 12.5
    assert config.success_code == 200
    assert config.use_mock is True
    assert config.transport is transport


def test_from_env_blank_values_keep_defaults() -> None:
    config = ClientConfig.from_env({"COURIER_TIMEOUT": " ", "COURIER_USE_MOCK": ""})
    assert config.timeout == 60.0
    assert config.use_mock is False
    assert config.base_url == ""


@pytest.mark.parametrize(
    ("env", "name"),
    [
        ({"COURIER_TIMEOUT": "soon"}, "COURIER_TIMEOUT"),
        ({"COURIER_SUCCESS_CODE": "ok"}, "COURIER_SUCCESS_CODE"),
        ({"COURIER_USE_MOCK": "maybe"}, "COURIER_USE_MOCK"),
    ],
)
def test_from_env_rejects_bad_values(env: dict[str, str], name: str) -> None:
    with pytest.raises(ConfigurationError, match=name):
        ClientConfig.from_env(env)


def test_invalid_config_values() -> None:
    with pytest.raises(ConfigurationError):
        ClientConfig(timeout=0)
    with pytest.raises(ConfigurationError):
        ClientConfig(discriminator="")


def test_static_auth_context_logout() -> None:
    calls: list[str] = []
    auth = StaticAuthContext(token="t", on_logout=lambda: calls.append("out"))

    auth.logout()

    assert auth.get_token() is None
    assert calls == ["out"]


def test_anonymous_path_matching() -> None:
    assert is_anonymous_path("/api/login", ("/login",))
    assert is_anonymous_path("/mock/api/login?next=/", ("/login",))
    assert not is_anonymous_path("/api/users", ("/login",))
    assert not is_anonymous_path("/api/login", ())


def test_logging_notifier(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR, logger="courier"):
        LoggingNotifier().error("Validation error")
    assert "Validation error" in caplog.text
