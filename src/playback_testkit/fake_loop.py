"""Controllable asyncio event loop with a virtual clock.

The loop never waits on wall-clock time or I/O. Two primitives drive it:

  - advance(seconds): move the virtual clock forward, firing the timers
    that come due inside the window in chronological order
  - flush(): drain the ready queue (future callbacks, task steps) in
    FIFO order until nothing is eligible to run

Coroutines, tasks, futures and asyncio.sleep run on it unchanged, because
the loop installs itself as the running loop while it executes callbacks.
"""
from __future__ import annotations

import asyncio
import collections
import heapq
import itertools
import logging
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, Iterator

from .config import DEFAULT_MAX_DRAIN_CALLBACKS
from .errors import DrainLimitExceededError, LoopDeadlockError

logger = logging.getLogger(__name__)


class FakeEventLoop(asyncio.AbstractEventLoop):
    """An event loop whose time only moves when a test says so."""

    def __init__(
        self,
        *,
        start_time: float = 0.0,
        max_drain_callbacks: int = DEFAULT_MAX_DRAIN_CALLBACKS,
    ) -> None:
        self._time = float(start_time)
        self._max_drain_callbacks = max_drain_callbacks
        self._ready: collections.deque[asyncio.Handle] = collections.deque()
        # (when, seq, timer): seq keeps same-time timers in scheduling order.
        self._scheduled: list[tuple[float, int, asyncio.TimerHandle]] = []
        self._timer_seq = itertools.count()
        self._closed = False
        self._debug = False
        self._running_depth = 0
        self._flushing = False
        self._exception_handler: Callable[..., Any] | None = None
        self._task_factory: Callable[..., Any] | None = None
        self._callback_errors: list[dict[str, Any]] = []

    def __repr__(self) -> str:
        return (
            f'<FakeEventLoop time={self._time} ready={len(self._ready)} '
            f'timers={self.timer_count} closed={self._closed}>'
        )

    # ── Virtual clock ──

    def time(self) -> float:
        return self._time

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing timers due inside the window.

        Timers scheduled by earlier callbacks also fire when they fall in
        the window. The ready queue is not drained. Returns the number of
        timers fired.
        """
        if seconds < 0:
            raise ValueError(f'Cannot advance by {seconds}: time never moves backward')
        self._check_closed()
        target = self._time + seconds
        fired = 0
        with self._running():
            while self._scheduled and self._scheduled[0][0] <= target:
                when, _, timer = heapq.heappop(self._scheduled)
                if timer.cancelled():
                    continue
                self._time = max(self._time, when)
                timer._run()
                fired += 1
        self._time = max(self._time, target)
        return fired

    def flush(self) -> int:
        """Run ready callbacks until none remain. Returns how many ran.

        A flush requested while already draining is a no-op; the outer
        drain picks up whatever the inner caller queued.
        """
        self._check_closed()
        if self._flushing:
            return 0
        ran = 0
        self._flushing = True
        try:
            with self._running():
                while self._ready:
                    handle = self._ready.popleft()
                    if handle.cancelled():
                        continue
                    if ran >= self._max_drain_callbacks:
                        self._ready.appendleft(handle)
                        raise DrainLimitExceededError(self._max_drain_callbacks)
                    handle._run()
                    ran += 1
        finally:
            self._flushing = False
        return ran

    @property
    def ready_count(self) -> int:
        return sum(1 for h in self._ready if not h.cancelled())

    @property
    def timer_count(self) -> int:
        return sum(1 for _, _, t in self._scheduled if not t.cancelled())

    def next_timer_when(self) -> float | None:
        """Return when the earliest live timer fires, or None."""
        while self._scheduled and self._scheduled[0][2].cancelled():
            heapq.heappop(self._scheduled)
        if not self._scheduled:
            return None
        return self._scheduled[0][0]

    def has_due_work(self) -> bool:
        """True if anything could run without the clock moving."""
        if self.ready_count:
            return True
        when = self.next_timer_when()
        return when is not None and when <= self._time

    @property
    def callback_errors(self) -> list[dict[str, Any]]:
        """Exception contexts reported to the default handler."""
        return list(self._callback_errors)

    @contextmanager
    def _running(self) -> Iterator[None]:
        previous = asyncio._get_running_loop()
        asyncio._set_running_loop(self)
        self._running_depth += 1
        try:
            yield
        finally:
            self._running_depth -= 1
            asyncio._set_running_loop(previous)

    # ── Scheduling ──

    def call_soon(self, callback, *args, context=None) -> asyncio.Handle:
        self._check_closed()
        handle = asyncio.Handle(callback, args, self, context)
        self._ready.append(handle)
        return handle

    def call_soon_threadsafe(self, callback, *args, context=None) -> asyncio.Handle:
        return self.call_soon(callback, *args, context=context)

    def call_later(self, delay, callback, *args, context=None) -> asyncio.TimerHandle:
        if delay is None:
            raise TypeError('delay must not be None')
        return self.call_at(self._time + delay, callback, *args, context=context)

    def call_at(self, when, callback, *args, context=None) -> asyncio.TimerHandle:
        if when is None:
            raise TypeError('when cannot be None')
        self._check_closed()
        timer = asyncio.TimerHandle(when, callback, args, self, context)
        heapq.heappush(self._scheduled, (timer.when(), next(self._timer_seq), timer))
        return timer

    def _timer_handle_cancelled(self, handle: asyncio.TimerHandle) -> None:
        # Cancelled timers are skipped lazily when popped.
        pass

    # ── Futures and tasks ──

    def create_future(self) -> asyncio.Future:
        return asyncio.Future(loop=self)

    def create_task(self, coro, *, name=None, context=None) -> asyncio.Task:
        self._check_closed()
        kwargs: dict[str, Any] = {}
        if name is not None:
            kwargs['name'] = name
        if context is not None:
            kwargs['context'] = context
        if self._task_factory is None:
            return asyncio.Task(coro, loop=self, **kwargs)
        return self._task_factory(self, coro, **kwargs)

    def get_task_factory(self):
        return self._task_factory

    def set_task_factory(self, factory) -> None:
        if factory is not None and not callable(factory):
            raise TypeError('task factory must be a callable or None')
        self._task_factory = factory

    def run_until_complete(self, future: Awaitable[Any]) -> Any:
        """Run in virtual time until ``future`` completes and return its result.

        The clock jumps straight to the next timer whenever the ready queue
        is empty, so no wall-clock time passes.
        """
        self._check_closed()
        if self.is_running():
            raise RuntimeError('This event loop is already running')
        fut = asyncio.ensure_future(future, loop=self)
        while not fut.done():
            self.flush()
            if fut.done():
                break
            when = self.next_timer_when()
            if when is None:
                raise LoopDeadlockError(
                    f'{fut!r} is pending with nothing scheduled at t={self._time}'
                )
            self.advance(max(0.0, when - self._time))
        return fut.result()

    def run_forever(self) -> None:
        raise NotImplementedError('FakeEventLoop is driven by advance() and flush()')

    def stop(self) -> None:
        pass

    # ── Lifecycle ──

    def is_running(self) -> bool:
        return self._running_depth > 0

    def is_closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self.is_running():
            raise RuntimeError('Cannot close a running event loop')
        if self._closed:
            return
        dropped = self.ready_count + self.timer_count
        if dropped:
            logger.debug('Closing fake loop with %d queued callbacks', dropped)
        self._closed = True
        self._ready.clear()
        self._scheduled.clear()

    def _check_closed(self) -> None:
        if self._closed:
            raise RuntimeError('Event loop is closed')

    async def shutdown_asyncgens(self) -> None:
        pass

    async def shutdown_default_executor(self, timeout=None) -> None:
        pass

    def get_debug(self) -> bool:
        return self._debug

    def set_debug(self, enabled: bool) -> None:
        self._debug = enabled

    # ── Error handling ──

    def get_exception_handler(self):
        return self._exception_handler

    def set_exception_handler(self, handler) -> None:
        if handler is not None and not callable(handler):
            raise TypeError(f'A callable object or None is expected, got {handler!r}')
        self._exception_handler = handler

    def default_exception_handler(self, context: dict[str, Any]) -> None:
        self._callback_errors.append(context)
        message = context.get('message') or 'Unhandled exception in fake event loop'
        exception = context.get('exception')
        exc_info = (type(exception), exception, exception.__traceback__) if exception else False
        logger.error(
            '%s (t=%s)', message, self._time,
            exc_info=exc_info, extra={'loop_time': self._time},
        )

    def call_exception_handler(self, context: dict[str, Any]) -> None:
        if self._exception_handler is None:
            self.default_exception_handler(context)
            return
        try:
            self._exception_handler(self, context)
        except (SystemExit, KeyboardInterrupt):
            raise
        except BaseException as exc:
            self.default_exception_handler({
                'message': 'Unhandled error in exception handler',
                'exception': exc,
                'context': context,
            })
