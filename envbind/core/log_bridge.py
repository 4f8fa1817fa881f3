"""Structured logging configuration and the default binder log sink."""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, TextIO

import structlog

LogFunc = Callable[..., None]

LOGGER_NAME = "envbind.core"

logger = structlog.get_logger(LOGGER_NAME)


def log_printf(format: str, *args: Any) -> None:
    """Default binder log sink: ``format % args`` emitted at info level.

    Until :func:`configure_logging` (or the application) configures
    structlog, its default ``PrintLogger`` writes these lines to stdout.
    """
    logger.info(format % args if args else format)


def _resolve_log_level(level: str | None) -> int:
    candidate = (level or "info").upper()
    value = logging.getLevelName(candidate)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: str | None = "info", fmt: str = "console", stream: TextIO | None = None) -> None:
    """Route structlog through stdlib logging onto ``stream`` (stderr by default).

    ``fmt`` selects ``"json"`` or ``"console"`` rendering.
    """
    min_level = _resolve_log_level(level)
    timestamper = structlog.processors.TimeStamper(fmt="iso", utc=True)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            timestamper,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
    )

    if fmt == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    root_logger = logging.getLogger()
    root_logger.setLevel(min_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stderr)
    console_handler.setLevel(min_level)
    console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer))
    root_logger.addHandler(console_handler)


__all__ = ["LOGGER_NAME", "LogFunc", "configure_logging", "log_printf"]
