"""Observability for playback-testkit.

Structured logging with scenario correlation for the fake event loop,
the virtual clock driver and the fetch helper.

Quick start::

    from playback_testkit.observability import configure_logging

    configure_logging(log_format="console")
"""

from .logging import (
    STRUCTURED_FIELDS,
    bind_scenario,
    configure_logging,
    reset_logging,
    scenario_ctx,
)

__all__ = [
    "STRUCTURED_FIELDS",
    "bind_scenario",
    "configure_logging",
    "reset_logging",
    "scenario_ctx",
]
