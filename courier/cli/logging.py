"""
CLI logging setup.

Logs go to stderr through rich. Known secrets (the bearer token) are redacted
from every record before it is formatted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler

_REDACTED = "[REDACTED]"


class RedactingFilter(logging.Filter):
    def __init__(self, secrets: list[str]) -> None:
        super().__init__()
        self._secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self._secrets:
            redacted = redacted.replace(secret, _REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


@dataclass(frozen=True, slots=True)
class PreviousLogging:
    level: int
    handlers: list[logging.Handler]


def _level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(*, verbosity: int, secrets: list[str] | None = None) -> PreviousLogging:
    root = logging.getLogger()
    previous = PreviousLogging(level=root.level, handlers=list(root.handlers))

    handler = RichHandler(
        console=Console(stderr=True, force_terminal=False),
        show_path=False,
        show_time=verbosity >= 2,
    )
    handler.addFilter(RedactingFilter(secrets or []))
    root.handlers = [handler]
    root.setLevel(_level_for(verbosity))
    return previous


def restore_logging(previous: PreviousLogging) -> None:
    root = logging.getLogger()
    root.handlers = previous.handlers
    root.setLevel(previous.level)
