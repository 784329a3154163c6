"""
In-flight request registry.

Maps a request key (the prepared path) to the cancellation handle of the call
currently tracked under it. Registering a key again replaces the tracked
handle without cancelling the previous one; only `cancel()` and `cancel_all()`
ever trigger a handle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable, Iterator
from typing import TypeVar

from ..exceptions import RequestCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MOCK_SEGMENT = "/mock"


class CancellationHandle:
    """
    Cancellation signal for one call.

    The handle is bound to the task running the transport call by `run()`.
    Triggering it before the call settles cancels that task and turns the
    outcome into `RequestCancelledError`; triggering it afterwards has no effect.
    """

    __slots__ = ("key", "_cancelled", "_task")

    def __init__(self, key: str) -> None:
        self.key = key
        self._cancelled = False
        self._task: asyncio.Future[object] | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def run(self, call: Awaitable[T]) -> T:
        task: asyncio.Future[T] = asyncio.ensure_future(call)
        self._task = task  # type: ignore[assignment]
        if self._cancelled:
            task.cancel()
        try:
            return await task
        except asyncio.CancelledError:
            if self._cancelled and task.cancelled():
                raise RequestCancelledError(self.key) from None
            raise

    def __repr__(self) -> str:
        return f"CancellationHandle(key={self.key!r}, cancelled={self._cancelled})"


class InFlightRegistry:
    def __init__(self, *, use_mock: bool = False) -> None:
        self._use_mock = use_mock
        self._handles: dict[str, CancellationHandle] = {}

    def key_for(self, path: str) -> str:
        """Normalize a request path into a registry key."""
        if self._use_mock:
            return path.replace(MOCK_SEGMENT, "", 1)
        return path

    def register(self, key: str) -> CancellationHandle:
        handle = CancellationHandle(key)
        self._handles[key] = handle
        return handle

    def release(self, key: str) -> None:
        """
        Stop tracking `key` once a call under it settled.

        Removal is by key: a settling call also drops a newer call registered
        under the same key, which can then no longer be cancelled.
        """
        self._handles.pop(key, None)

    def cancel(self, keys: str | Iterable[str]) -> None:
        key_list = [keys] if isinstance(keys, str) else list(keys)
        for key in key_list:
            handle = self._handles.pop(key, None)
            if handle is not None:
                logger.debug("Cancelling request %s", key)
                handle.cancel()

    def cancel_all(self) -> None:
        handles = list(self._handles.values())
        self._handles.clear()
        if handles:
            logger.debug("Cancelling %d in-flight request(s)", len(handles))
        for handle in handles:
            handle.cancel()

    def get(self, key: str) -> CancellationHandle | None:
        return self._handles.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._handles

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._handles))
