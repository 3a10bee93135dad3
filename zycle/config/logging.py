"""
Structured logging with structlog.

Events are snake_case names with key/value context, e.g.
``create_invoice_complete invoice_id=... number=7 deltas={...}``. Request id
and tenant are bound per request by the API logging middleware.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from zycle.config.settings import get_settings

# Weights and money values are logged at this precision
LOG_FLOAT_DIGITS = 6


def add_app_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add application context to log events."""
    settings = get_settings()
    event_dict["app"] = settings.app_name
    event_dict["version"] = settings.app_version
    event_dict["environment"] = settings.environment
    return event_dict


def _round(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, LOG_FLOAT_DIGITS)
    if isinstance(value, dict):
        return {k: _round(v) for k, v in value.items()}
    return value


def round_floats(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Trim float noise from kg weights, prices and stock deltas."""
    return {key: _round(value) for key, value in event_dict.items()}


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog and stdlib logging.

    Console output in development, JSON lines elsewhere. ``level`` overrides
    the configured log level.
    """
    settings = get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        round_floats,
    ]
    if settings.is_development:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [
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

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, (level or settings.log_level).upper()),
    )
    for noisy in ("aiosqlite", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
