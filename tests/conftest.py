"""Pytest configuration for playback_testkit tests."""
import sys
from pathlib import Path

# Add src/ to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC = _PROJECT_ROOT / 'src'
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

import pytest

pytest_plugins = ['playback_testkit.pytest_plugin']


@pytest.fixture(autouse=True)
def _clean_harness_env(monkeypatch):
    """Keep PLAYBACK_TESTKIT_* settings from the outer shell out of tests."""
    for name in (
        'PLAYBACK_TESTKIT_SETTLE_ROUNDS',
        'PLAYBACK_TESTKIT_LEFTOVER_POLICY',
        'PLAYBACK_TESTKIT_MAX_DRAIN_CALLBACKS',
        'PLAYBACK_TESTKIT_FETCH_TIMEOUT',
        'PLAYBACK_TESTKIT_LOG_LEVEL',
        'PLAYBACK_TESTKIT_LOG_FORMAT',
    ):
        monkeypatch.delenv(name, raising=False)
