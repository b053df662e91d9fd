"""Observable completion state for in-flight asynchronous work."""
from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Awaitable, Generator


class PromiseStatus(Enum):
    """Settlement state of a tracked future."""
    PENDING = 'pending'
    RESOLVED = 'resolved'
    REJECTED = 'rejected'


class TrackedPromise:
    """A future paired with a status that its done-callback keeps current.

    The status changes at most once. A cancelled future counts as
    rejected. Awaiting the handle awaits the underlying future.
    """

    def __init__(self, future: asyncio.Future) -> None:
        self._future = future
        self._status = PromiseStatus.PENDING
        future.add_done_callback(self._settle)

    def __repr__(self) -> str:
        return f'<TrackedPromise status={self._status.value}>'

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    @property
    def future(self) -> asyncio.Future:
        return self._future

    @property
    def status(self) -> PromiseStatus:
        return self._status

    @property
    def is_pending(self) -> bool:
        return self._status is PromiseStatus.PENDING

    @property
    def is_settled(self) -> bool:
        return self._status is not PromiseStatus.PENDING

    def _settle(self, future: asyncio.Future) -> None:
        if self._status is not PromiseStatus.PENDING:
            return
        if future.cancelled() or future.exception() is not None:
            self._status = PromiseStatus.REJECTED
        else:
            self._status = PromiseStatus.RESOLVED


def capture_promise_status(
    awaitable: Awaitable[Any],
    *,
    loop: asyncio.AbstractEventLoop | None = None,
) -> TrackedPromise:
    """Start tracking ``awaitable`` and return its status handle.

    Coroutines are scheduled as tasks on ``loop`` (or the running loop).
    The status updates when the loop runs the future's done-callbacks.
    """
    future = asyncio.ensure_future(awaitable, loop=loop)
    return TrackedPromise(future)
