"""Logging configuration using structlog.

Logs go to stderr so stdout carries only query results (piping).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL_ENV = "ATHENA_QUERY_LOG_LEVEL"

_LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class _StderrLoggerFactory:
    """Look up sys.stderr each time a logger is built.

    CliRunner swaps and closes stderr between invocations, so a handle
    captured at configure() time goes stale.
    """

    def __call__(self, *args: Any, **kwargs: Any) -> structlog.PrintLogger:
        return structlog.PrintLogger(file=sys.stderr)


def _resolve_level(verbose: bool) -> int:
    if verbose:
        return logging.DEBUG
    name = os.environ.get(LOG_LEVEL_ENV, "info").lower()
    return _LOG_LEVELS.get(name, logging.INFO)


def setup_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Configure structlog for Athena Query.

    Args:
        verbose: Log at DEBUG. Otherwise the level comes from
            ATHENA_QUERY_LOG_LEVEL, defaulting to INFO.
        json_logs: Render one JSON object per line instead of console text.
    """
    renderer: Any
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(_resolve_level(verbose)),
        context_class=dict,
        logger_factory=_StderrLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, bound with ``logger=name`` when given.

    Call inside functions or __init__(), never at import time, so the
    configuration from setup_logging() applies.
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger=name)
    return logger
