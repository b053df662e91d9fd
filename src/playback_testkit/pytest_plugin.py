"""pytest integration for playback-testkit.

Enable it from a conftest::

    pytest_plugins = ['playback_testkit.pytest_plugin']

Every test gets its own fake loop and equality registry; nothing leaks
between scenarios. Run with ``--playback-log`` (or set
``playback_testkit_log = true`` in the ini file) to render harness log
entries through structlog, tagged with the running test's node id.
"""
from __future__ import annotations

import pytest

from .clock_driver import VirtualClockDriver
from .config import HarnessConfig
from .element_diff import diff_nodes, is_element
from .equality import EqualityRegistry, default_registry
from .fake_loop import FakeEventLoop
from .observability.logging import bind_scenario, configure_logging


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup('playback-testkit')
    group.addoption(
        '--playback-log',
        action='store_true',
        default=False,
        help='Render harness log entries as structured JSON tagged with the test id',
    )
    parser.addini(
        'playback_testkit_log',
        type='bool',
        default=False,
        help='Same as --playback-log',
    )
    parser.addini(
        'playback_testkit_log_level',
        default='',
        help='Log level used with --playback-log (default PLAYBACK_TESTKIT_LOG_LEVEL or INFO)',
    )


def pytest_configure(config: pytest.Config) -> None:
    if config.getoption('--playback-log') or config.getini('playback_testkit_log'):
        configure_logging(level=config.getini('playback_testkit_log_level') or None)


@pytest.fixture
def harness_config() -> HarnessConfig:
    """Harness tunables read from PLAYBACK_TESTKIT_* env vars."""
    return HarnessConfig.from_env()


@pytest.fixture
def fake_loop(request, harness_config):
    """A fresh FakeEventLoop for one scenario, closed at teardown."""
    with bind_scenario(request.node.nodeid):
        loop = FakeEventLoop(max_drain_callbacks=harness_config.max_drain_callbacks)
        try:
            yield loop
        finally:
            loop.close()


@pytest.fixture
def clock_driver(fake_loop, harness_config) -> VirtualClockDriver:
    return VirtualClockDriver(fake_loop, harness_config)


@pytest.fixture
def equality() -> EqualityRegistry:
    """Registry with the segment-reference tester and element matcher."""
    return default_registry()


def pytest_assertrepr_compare(config, op, left, right):
    if op != '==' or not (is_element(left) and is_element(right)):
        return None
    diff = diff_nodes(left, right)
    if diff is None:
        return [
            'element trees are structurally equal but are different objects',
            "use equality.assert_matches('to_equal_element', ...) to compare them",
        ]
    return ['element trees differ', diff]
