"""Logging configuration for the Xibo agent toolset.

Structured logging with structlog: pretty console output in development,
JSON lines everywhere else.
"""

import logging
import sys
from typing import Optional

import structlog
from structlog.types import Processor

from xibo_agent.config import Settings, settings as default_settings


def setup_logging(settings: Optional[Settings] = None):
    """Configure structured logging with structlog."""
    settings = settings or default_settings

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # PrintLoggerFactory loggers carry no name, so add_logger_name is left out
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.env in ("local", "dev", "development", "test"):
        renderers: list[Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        renderers = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # MCP stdio transport owns stdout
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )
