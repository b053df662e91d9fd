"""Configuration for the playback test harness."""
import os
from dataclasses import dataclass
from enum import Enum

# Pragmatic ceiling on zero-time promise chaining per tick.
DEFAULT_SETTLE_ROUNDS = 6
DEFAULT_MAX_DRAIN_CALLBACKS = 100_000
DEFAULT_FETCH_TIMEOUT = 10.0


class LeftoverPolicy(str, Enum):
    """What the clock driver does when work outlives the settle rounds.

    - WARN: log a warning and let the work carry into the next advance
    - RAISE: fail the scenario with UnsettledWorkError
    - IGNORE: carry the work silently
    """
    WARN = 'warn'
    RAISE = 'raise'
    IGNORE = 'ignore'

    @classmethod
    def from_env(cls) -> 'LeftoverPolicy':
        """Get policy from PLAYBACK_TESTKIT_LEFTOVER_POLICY env var.

        Defaults to WARN if not specified.
        Case-insensitive.
        """
        policy_str = os.environ.get('PLAYBACK_TESTKIT_LEFTOVER_POLICY', 'warn').lower()
        try:
            return cls(policy_str)
        except ValueError:
            raise ValueError(
                f"Invalid PLAYBACK_TESTKIT_LEFTOVER_POLICY='{policy_str}'. "
                f"Must be one of: {', '.join(p.value for p in cls)}"
            )


class LogFormat(str, Enum):
    """How configure_logging renders entries."""
    JSON = 'json'
    CONSOLE = 'console'

    @classmethod
    def from_env(cls) -> 'LogFormat':
        """Get format from PLAYBACK_TESTKIT_LOG_FORMAT env var (default json)."""
        format_str = os.environ.get('PLAYBACK_TESTKIT_LOG_FORMAT', 'json').lower()
        try:
            return cls(format_str)
        except ValueError:
            raise ValueError(
                f"Invalid PLAYBACK_TESTKIT_LOG_FORMAT='{format_str}'. "
                f"Must be one of: {', '.join(f.value for f in cls)}"
            )


def _int_from_env(name: str, default: int, *, minimum: int) -> int:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Invalid {name}='{raw}'. Must be an integer")
    if value < minimum:
        raise ValueError(f"Invalid {name}='{raw}'. Must be >= {minimum}")
    return value


def _float_from_env(name: str, default: float) -> float:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid {name}='{raw}'. Must be a number")
    if value <= 0:
        raise ValueError(f"Invalid {name}='{raw}'. Must be > 0")
    return value


@dataclass(frozen=True)
class HarnessConfig:
    """Tunables for the fake event loop, clock driver and fetch helper."""
    settle_rounds: int = DEFAULT_SETTLE_ROUNDS
    leftover_policy: LeftoverPolicy = LeftoverPolicy.WARN
    max_drain_callbacks: int = DEFAULT_MAX_DRAIN_CALLBACKS
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT

    @classmethod
    def from_env(cls) -> 'HarnessConfig':
        """Build a config from PLAYBACK_TESTKIT_* environment variables."""
        return cls(
            settle_rounds=_int_from_env(
                'PLAYBACK_TESTKIT_SETTLE_ROUNDS', DEFAULT_SETTLE_ROUNDS, minimum=0,
            ),
            leftover_policy=LeftoverPolicy.from_env(),
            max_drain_callbacks=_int_from_env(
                'PLAYBACK_TESTKIT_MAX_DRAIN_CALLBACKS',
                DEFAULT_MAX_DRAIN_CALLBACKS,
                minimum=1,
            ),
            fetch_timeout=_float_from_env(
                'PLAYBACK_TESTKIT_FETCH_TIMEOUT', DEFAULT_FETCH_TIMEOUT,
            ),
        )
