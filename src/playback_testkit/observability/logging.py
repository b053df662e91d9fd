"""Structured logging for playback-testkit.

Library modules log through ``logging.getLogger(__name__)`` and pass
their structured fields as ``extra``. configure_logging() routes those
records through structlog, which adds the scenario name, level, logger
name and timestamp and renders one JSON object (or console line) per
entry.

Usage::

    from playback_testkit.observability import configure_logging

    configure_logging()  # or run pytest with --playback-log

A clock-driver warning then renders as::

    {"event": "Work still queued at tick 3 after 6 settle rounds; ...",
     "tick": 3, "settle_rounds": 6, "scenario": "tests/test_abr.py::test_switch",
     "level": "warning", "logger": "playback_testkit.clock_driver", ...}
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

from ..config import LogFormat

# Name of the test scenario currently driving a fake loop.
scenario_ctx: ContextVar[str | None] = ContextVar("scenario", default=None)

# ``extra`` keys the harness attaches to its own records.
STRUCTURED_FIELDS = ("tick", "settle_rounds", "loop_time", "uri", "status_code")

_handler: logging.Handler | None = None


@contextmanager
def bind_scenario(name: str) -> Iterator[None]:
    """Tag every entry logged inside the block with ``scenario=name``."""
    token = scenario_ctx.set(name)
    try:
        yield
    finally:
        scenario_ctx.reset(token)


def _add_scenario(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    scenario = scenario_ctx.get()
    if scenario is not None:
        event_dict["scenario"] = scenario
    return event_dict


def _resolve_level(level: str | None) -> int:
    name = (level or os.environ.get("PLAYBACK_TESTKIT_LOG_LEVEL", "INFO")).upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(
            f"Invalid log level '{name}'. "
            "Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
        )
    return value


def configure_logging(
    *,
    level: str | None = None,
    log_format: LogFormat | str | None = None,
) -> logging.Handler:
    """Install the structlog formatter on the root logger and return its handler.

    Args:
        level: Log level name. Defaults to PLAYBACK_TESTKIT_LOG_LEVEL or INFO.
        log_format: ``json`` or ``console``. Defaults to
            PLAYBACK_TESTKIT_LOG_FORMAT or ``json``.

    Calling it again returns the handler already installed. Other root
    handlers (pytest's capture handlers included) are left alone.
    """
    global _handler
    if _handler is not None:
        return _handler

    root_level = _resolve_level(level)
    fmt = LogFormat(log_format) if log_format is not None else LogFormat.from_env()

    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.ExtraAdder(allow=STRUCTURED_FIELDS),
        _add_scenario,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if fmt is LogFormat.JSON:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    # structlog loggers created by test code share the same pipeline.
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(root_level)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    _handler = handler
    return handler


def reset_logging() -> None:
    """Remove the handler installed by configure_logging, if any."""
    global _handler
    if _handler is None:
        return
    logging.getLogger().removeHandler(_handler)
    _handler = None
    structlog.reset_defaults()
