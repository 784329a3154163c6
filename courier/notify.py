"""
User-facing failure notices.

Exactly one notice is emitted per failed call; cancelled calls emit none.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def error(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: routes notices to the `courier.notify` logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger

    def error(self, message: str) -> None:
        self._log.error("%s", message)
