"""Structured logging configuration using structlog.

Logs render as colored console output in development and as JSON lines
otherwise.

Example:
    >>> from cyberguard.utils.logging import setup_logging
    >>> setup_logging(load_app_config())
    >>> structlog.get_logger(__name__).info("user_logged_in", user_id=3)
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from cyberguard.config.app_config import AppConfig


def setup_logging(config: "AppConfig") -> None:
    """Configure structlog and the standard library root logger.

    Args:
        config: Application config holding the log level and renderer choice.
    """
    log_level = getattr(logging, config.logging.level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if config.logging.json_output or not config.is_development:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    for logger_name in ("uvicorn.access", "httpx", "httpcore"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def bind_request_context(**kwargs: object) -> None:
    """Bind request-scoped values (path, user_id) to subsequent log calls."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    """Drop request-scoped values at the end of a request."""
    structlog.contextvars.clear_contextvars()
