from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from courier import ClientConfig, RequestClient, StaticAuthContext

BASE_URL = "https://api.example"


class RecordingNotifier:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        self.messages.append(message)


@dataclass
class Session:
    auth: StaticAuthContext
    logouts: list[None] = field(default_factory=list)


ClientFactory = Callable[..., RequestClient]


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def session() -> Session:
    logouts: list[None] = []
    auth = StaticAuthContext(token="secret-token", on_logout=lambda: logouts.append(None))
    return Session(auth=auth, logouts=logouts)


@pytest.fixture
def make_client(session: Session, notifier: RecordingNotifier) -> ClientFactory:
    """Build a client whose transport is `handler`, sharing the session and notifier fixtures."""

    def _make(handler: Callable[[httpx.Request], Any], **kwargs: Any) -> RequestClient:
        config = ClientConfig(
            base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs.pop("config", {})
        )
        return RequestClient(config, auth=session.auth, notifier=notifier, **kwargs)

    return _make
