"""Error hierarchy for the playback test harness.

Harness errors signal misuse of the harness itself (driving a real loop,
runaway drains, work that never settles). A structural mismatch is not
an error: diff and comparator results are ordinary values.
"""
from __future__ import annotations

from typing import Any

# Attributes that runtimes attach to errors for formatting only.
IGNORED_ERROR_FIELDS = frozenset({'stack', 'message'})


class HarnessError(Exception):
    """Base class for playback-testkit errors."""


class FakeLoopRequiredError(HarnessError, TypeError):
    """Raised when a driver is given a loop it cannot control."""


class DrainLimitExceededError(HarnessError, RuntimeError):
    """Raised when a single drain runs more callbacks than allowed."""

    def __init__(self, limit: int) -> None:
        super().__init__(
            f'Drain exceeded {limit} callbacks; '
            f'a callback is probably rescheduling itself forever'
        )
        self.limit = limit


class UnsettledWorkError(HarnessError, RuntimeError):
    """Raised when work is still due after the settle rounds of a tick."""

    def __init__(self, tick: int, settle_rounds: int) -> None:
        super().__init__(
            f'Work still queued at tick {tick} after {settle_rounds} settle rounds'
        )
        self.tick = tick
        self.settle_rounds = settle_rounds


class LoopDeadlockError(HarnessError, RuntimeError):
    """Raised when an awaited value can never complete on a fake loop."""


class FetchError(HarnessError):
    """Raised when a fetch does not produce a usable response body."""

    def __init__(
        self,
        uri: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        self.uri = uri
        self.status_code = status_code
        self.reason = reason
        if reason is None:
            reason = f'HTTP {status_code} for {uri}'
        super().__init__(reason)


class StrictMockError(HarnessError):
    """Raised by a strict mock that was called without an override."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


def _error_fields(error: BaseException) -> dict[str, Any]:
    return {
        k: v for k, v in vars(error).items()
        if k not in IGNORED_ERROR_FIELDS and not k.startswith('__')
    }


def assert_error_matches(actual: Any, expected: BaseException) -> None:
    """Assert that ``actual`` is an error shaped like ``expected``.

    The types must match exactly. Every attribute set on ``expected`` must
    be present on ``actual`` with an equal value; extra attributes on
    ``actual`` are ignored, as are ``stack`` and ``message``.
    """
    if type(actual) is not type(expected):
        raise AssertionError(
            f'Expected error of type {type(expected).__name__}, '
            f'got {type(actual).__name__}: {actual!r}'
        )
    missing = object()
    for name, value in _error_fields(expected).items():
        got = getattr(actual, name, missing)
        if got is missing:
            raise AssertionError(f'Error is missing attribute {name!r}')
        if got != value:
            raise AssertionError(
                f'Error attribute {name!r} differs: {got!r} != {value!r}'
            )
