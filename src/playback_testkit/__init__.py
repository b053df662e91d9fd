"""Deterministic test harness for asynchronous media playback code.

Provides a fake asyncio event loop driven in virtual time, a promise
status tracker, a structural diff for markup trees, and domain equality
for segment references.
"""
from .clock_driver import (
    TICK_SECONDS,
    VirtualClockDriver,
    delay,
    fake_event_loop,
)
from .comparators import compare_references
from .config import HarnessConfig, LeftoverPolicy, LogFormat
from .element_diff import (
    MatcherResult,
    child_nodes,
    diff_nodes,
    inner_markup,
    outer_markup,
    to_equal_element,
)
from .equality import EqualityRegistry, default_registry
from .errors import (
    DrainLimitExceededError,
    FakeLoopRequiredError,
    FetchError,
    HarnessError,
    LoopDeadlockError,
    StrictMockError,
    UnsettledWorkError,
    assert_error_matches,
)
from .fake_loop import FakeEventLoop
from .fetch import fetch
from .mocks import make_mock_object_strict
from .promise_status import PromiseStatus, TrackedPromise, capture_promise_status
from .references import (
    InitSegmentReference,
    ReferenceKind,
    SegmentReference,
    static_uris,
)

__version__ = '0.1.0'

__all__ = [
    'TICK_SECONDS',
    'VirtualClockDriver',
    'delay',
    'fake_event_loop',
    'compare_references',
    'HarnessConfig',
    'LeftoverPolicy',
    'LogFormat',
    'MatcherResult',
    'child_nodes',
    'diff_nodes',
    'inner_markup',
    'outer_markup',
    'to_equal_element',
    'EqualityRegistry',
    'default_registry',
    'DrainLimitExceededError',
    'FakeLoopRequiredError',
    'FetchError',
    'HarnessError',
    'LoopDeadlockError',
    'StrictMockError',
    'UnsettledWorkError',
    'assert_error_matches',
    'FakeEventLoop',
    'fetch',
    'make_mock_object_strict',
    'PromiseStatus',
    'TrackedPromise',
    'capture_promise_status',
    'InitSegmentReference',
    'ReferenceKind',
    'SegmentReference',
    'static_uris',
]
