"""
Structured Logging Setup

Routes structlog through the stdlib logging module so that domain loggers
(structlog) and infrastructure loggers (logging) share handlers and levels.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings


def configure_logging(
    log_level: Optional[str] = None, log_format: Optional[str] = None
) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level, defaults to settings.LOG_LEVEL
        log_format: "console" or "json", defaults to settings.LOG_FORMAT
    """
    level_name = (log_level or settings.LOG_LEVEL).upper()
    level = getattr(logging, level_name)
    fmt = (log_format or settings.LOG_FORMAT).lower()

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(environment=settings.ENVIRONMENT)
