"""Virtual clock driver: simulated seconds without wall-clock waiting.

Each tick settles already-due work, lets the scenario inject its side
effects, then advances the clock by one second and drains again.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable

from .config import HarnessConfig, LeftoverPolicy
from .errors import FakeLoopRequiredError, UnsettledWorkError
from .fake_loop import FakeEventLoop

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0

OnTick = Callable[[int], Any]


class VirtualClockDriver:
    """Drives a FakeEventLoop through whole-second ticks.

    Usage:
        loop = FakeEventLoop()
        VirtualClockDriver(loop).run(3, on_tick=lambda t: ...)
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        config: HarnessConfig | None = None,
    ) -> None:
        if not isinstance(loop, FakeEventLoop):
            raise FakeLoopRequiredError(
                f'VirtualClockDriver needs a FakeEventLoop, got {type(loop).__name__}'
            )
        self._loop = loop
        self._config = config or HarnessConfig()

    @property
    def loop(self) -> FakeEventLoop:
        return self._loop

    @property
    def config(self) -> HarnessConfig:
        return self._config

    def run(self, duration_seconds: int, on_tick: OnTick | None = None) -> None:
        """Advance ``duration_seconds`` ticks, calling ``on_tick(t)`` before each.

        ``on_tick`` may return an awaitable; it is scheduled on the loop
        and started before the clock moves.
        """
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int):
            raise ValueError(f'duration_seconds must be an int, got {duration_seconds!r}')
        if duration_seconds < 0:
            raise ValueError(f'duration_seconds must be >= 0, got {duration_seconds}')

        loop = self._loop
        for tick in range(duration_seconds):
            for _ in range(self._config.settle_rounds):
                loop.advance(0)
                loop.flush()
            self._check_settled(tick)

            if on_tick is not None:
                result = on_tick(tick)
                if inspect.isawaitable(result):
                    asyncio.ensure_future(result, loop=loop)
                loop.flush()

            loop.advance(TICK_SECONDS)
            loop.flush()

    def _check_settled(self, tick: int) -> None:
        if not self._loop.has_due_work():
            return
        policy = self._config.leftover_policy
        if policy == LeftoverPolicy.RAISE:
            raise UnsettledWorkError(tick, self._config.settle_rounds)
        if policy == LeftoverPolicy.WARN:
            logger.warning(
                'Work still queued at tick %d after %d settle rounds; '
                'it carries into the next advance',
                tick, self._config.settle_rounds,
                extra={'tick': tick, 'settle_rounds': self._config.settle_rounds},
            )


def fake_event_loop(
    loop: asyncio.AbstractEventLoop,
    duration_seconds: int,
    on_tick: OnTick | None = None,
    *,
    config: HarnessConfig | None = None,
) -> None:
    """Function form of VirtualClockDriver(loop, config).run(...)."""
    VirtualClockDriver(loop, config).run(duration_seconds, on_tick)


def delay(
    seconds: float,
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Future:
    """Return a future resolved after ``seconds`` of loop time.

    On a FakeEventLoop the loop is flushed right after resolving, so
    continuations run at the instant the timer fires.
    """
    if loop is None:
        loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _resolve() -> None:
        if not future.done():
            future.set_result(None)
        if isinstance(loop, FakeEventLoop):
            loop.flush()

    loop.call_later(seconds, _resolve)
    return future
