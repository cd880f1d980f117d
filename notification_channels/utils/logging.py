"""Structured Logging Configuration.

This module configures structlog for the whole package. Modules obtain
loggers with ``structlog.get_logger(__name__)`` and log snake_case events
with keyword context; this module only decides how those events render.

Configuration:
- JSON output format (default, for log aggregation)
- Console output format (LOG_FORMAT=console, for local CLI runs)
- Level filtering from LOG_LEVEL
"""

import logging
import sys

import structlog

from notification_channels.config import get_log_format, get_log_level


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog processors and output.

    Args:
        level: Level name; defaults to LOG_LEVEL from environment.
        json_output: Render JSON lines when True, human-readable console
            output when False. Defaults to LOG_FORMAT from environment.
    """
    level_name = level or get_log_level()
    if json_output is None:
        json_output = get_log_format() == "json"

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
