"""
Logging Configuration

Structured logging built on structlog.

Log Output:
===========
Development:
    2025-03-02 09:12:44 [warning  ] Remote cache get failed        key=discover:projects:... error=...

Production (JSON):
    {"timestamp": "2025-03-02T09:12:44", "level": "warning", "event": "Remote cache get failed", "key": "..."}

Usage:
======
    from src.shared.core.logging import logger, get_logger, log_context

    logger.info("Project liked", project_id=str(project_id), likes=likes)

    cache_logger = get_logger("cache")
    cache_logger.debug("Cache hit", key=key)

    # Bind request-scoped values to every later log line
    log_context(request_id=request_id, viewer_id=viewer_id)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import Processor

from src.config.settings import settings


def setup_logging() -> None:
    """
    Configure structlog and the standard logging bridge.

    Development gets colored console output, every other environment
    gets one JSON object per line.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper()),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_development:
        processors: list[Processor] = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a named structured logger.

    Args:
        name: Logger name (shows up as the ``logger`` field)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> None:
    """
    Bind key/value pairs to all subsequent log calls in this context.

    Args:
        **kwargs: Values to attach (request_id, viewer_id, ...)
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    """Drop all values bound with log_context()."""
    structlog.contextvars.clear_contextvars()


setup_logging()

logger = get_logger("folio")
