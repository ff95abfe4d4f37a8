"""Structured logging configuration using structlog."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

from meiliscout.exceptions import ConfigurationError

if TYPE_CHECKING:
    from meiliscout.config.settings import ObservabilitySettings


LOG_FORMATS = ("json", "console")


def setup_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging for the driver and its host application.

    Args:
        settings: Observability settings. Uses defaults if None.

    Raises:
        ConfigurationError: If the log level or log format is unknown.
    """
    log_level = settings.log_level.upper() if settings else "INFO"
    log_format = settings.log_format.lower() if settings else "json"

    if log_format not in LOG_FORMATS:
        raise ConfigurationError(f"Unknown log format {log_format!r}, expected one of {LOG_FORMATS}")
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"Unknown log level {log_level.lower()!r}")

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.INFO),
    )
