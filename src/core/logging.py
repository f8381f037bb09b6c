"""Structured logging configuration.

Console rendering in development, JSON lines otherwise. Request-scoped values
(request_id, method, path) are bound through ``structlog.contextvars`` by the
request logging middleware and merged into every entry.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from core.config import Settings, settings as default_settings


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog and the stdlib root logger."""
    settings = settings or default_settings
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.log_format == "json" or settings.is_production:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=settings.is_production,
    )

    # Third-party libraries (uvicorn, sqlalchemy) still log through stdlib
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        logging.getLogger(logger_name).setLevel(level)
