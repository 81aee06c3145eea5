"""Structured logging for Quill.

Quill is a library first: it only emits debug-level events (a template was
parsed, a loop or count source could not be enumerated). Those events go
through the standard library logger named after the emitting module, so an
embedding application controls them with ordinary ``logging`` levels.

``configure_logging`` is for the ``quill`` command and for applications that
want Quill's rendering of events:

- JSON lines when ``QUILL_LOG_FORMAT=json`` (or ``force_json=True``)
- colored console output otherwise

Hot paths check ``debug_enabled(log)`` before building an event, so a
disabled debug level costs one level lookup and nothing else.

Usage:
    from quill.logging import configure_logging, debug_enabled, get_logger

    configure_logging(level=logging.DEBUG)

    log = get_logger(__name__)
    if debug_enabled(log):
        log.debug("template_parsed", length=120)
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import Processor

__all__ = [
    "get_logger",
    "configure_logging",
    "debug_enabled",
    "bind_context",
    "clear_context",
]

LOG_FORMAT_ENV_VAR = "QUILL_LOG_FORMAT"
LOG_LEVEL_ENV_VAR = "QUILL_LOG_LEVEL"

DEFAULT_LOG_LEVEL = logging.WARNING


def _level_from_env() -> int:
    """Level named by QUILL_LOG_LEVEL; unknown names fall back to WARNING."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR, "").upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def _json_from_env() -> bool:
    return os.environ.get(LOG_FORMAT_ENV_VAR, "").lower() == "json"


def _event_enrichers() -> list[Processor]:
    """Processors that add fields; shared with records from plain stdlib loggers."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(use_json: bool) -> Processor:
    if use_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.plain_traceback,
    )


def _event_chain(use_json: bool) -> list[Processor]:
    """Full chain for structlog events: level filter, enrichers, renderer."""
    tracebacks: Processor = (
        structlog.processors.dict_tracebacks
        if use_json
        else structlog.processors.format_exc_info
    )
    return [
        structlog.stdlib.filter_by_level,
        *_event_enrichers(),
        tracebacks,
        _renderer(use_json),
    ]


def _stderr_handler(level: int, use_json: bool) -> logging.Handler:
    """Handler that renders records from plain stdlib loggers like structlog events."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(use_json),
            ],
            foreign_pre_chain=_event_enrichers(),
        )
    )
    return handler


def configure_logging(
    *,
    force_json: bool = False,
    level: int | None = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Safe to call repeatedly; each call replaces the root handlers.

    Args:
        force_json: Emit JSON lines regardless of QUILL_LOG_FORMAT.
        level: Log level. If None, read from QUILL_LOG_LEVEL (default WARNING).
    """
    use_json = force_json or _json_from_env()
    log_level = level if level is not None else _level_from_env()

    structlog.configure(
        processors=_event_chain(use_json),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(_stderr_handler(log_level, use_json))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger backed by the stdlib logger ``name``.

    Unlike ``structlog.get_logger``, the stdlib logger is fixed here rather
    than produced by the configured factory, so library events honour stdlib
    levels even if ``configure_logging`` is never called.

    Example:
        log = get_logger(__name__)
        log.debug("loop_source_not_enumerable", collection="$n")
    """
    log: structlog.stdlib.BoundLogger = structlog.wrap_logger(
        logging.getLogger(name),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    return log


def debug_enabled(log: structlog.stdlib.BoundLogger) -> bool:
    """Whether a debug event on ``log`` would be emitted at all."""
    return log.isEnabledFor(logging.DEBUG)


def bind_context(**context: Any) -> None:
    """Bind context variables included in every subsequent event.

    Example:
        bind_context(template="greeting.qt")
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
