"""Structlog configuration for igprofile."""

import logging
import sys
from typing import TextIO

import structlog

from igprofile.config import ServiceConfig, LogFormat

# Libraries that log every request or query below WARNING
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def configure_logging(config: ServiceConfig | None = None, stream: TextIO | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Console output is colored only when the stream is a terminal. JSON output
    renders one object per line with tracebacks flattened into the event.

    Args:
        config: ServiceConfig instance, uses defaults if None
        stream: Where log lines go, stdout if None. The CLI passes stderr
            when stdout carries a JSON body.
    """
    if config is None:
        config = ServiceConfig()
    if stream is None:
        stream = sys.stdout

    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.log_format == LogFormat.JSON:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        is_tty = getattr(stream, "isatty", lambda: False)()
        processors.extend([
            structlog.dev.set_exc_info,
            structlog.dev.ConsoleRenderer(colors=is_tty),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """
    Get a configured structlog logger.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog BoundLogger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
