"""
Authentication context consumed by the request pipeline.

The pipeline never owns session state. It reads the token and header name from
an injected provider and calls `logout()` when the backend reports the session
as lost.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@runtime_checkable
class AuthContextProvider(Protocol):
    def get_token(self) -> str | None: ...

    def get_token_header_name(self) -> str: ...

    def logout(self) -> None: ...


@dataclass(slots=True)
class StaticAuthContext:
    """
    In-memory session holding a single bearer token.

    `logout()` forgets the token and then calls `on_logout`, if set.
    """

    token: str | None = None
    header_name: str = "Authorization"
    on_logout: Callable[[], None] | None = None

    def get_token(self) -> str | None:
        return self.token

    def get_token_header_name(self) -> str:
        return self.header_name

    def logout(self) -> None:
        self.token = None
        if self.on_logout is not None:
            self.on_logout()


def bearer(token: str) -> str:
    return f"Bearer {token}"


def is_anonymous_path(path: str, anonymous_paths: tuple[str, ...]) -> bool:
    """Whether `path` is an endpoint that must not carry the bearer header."""
    return any(fragment in path for fragment in anonymous_paths)
