"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides structured logging with JSON output for production and
human-readable console output for development, plus the masking helpers
used wherever subscriber data reaches a log line.
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog with ISO timestamps, the log level and either a JSON or
    a console renderer, on top of standard library loggers so that third-party
    libraries (uvicorn, SQLAlchemy) share the same level.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_email(email: str) -> str:
    """Returns a masked version of an email address for safe logging.

    Example: 'ursula_le_guin@gmail.com' -> 'ur***@gmail.com'
    """
    if not email or "@" not in email:
        return "***"
    local, _, domain = email.partition("@")
    return f"{local[:2]}***@{domain}"


def token_prefix(token: str) -> str:
    """Returns the first characters of a token, enough to correlate log lines."""
    return token[:8] if token else "none"


# Create a singleton logger instance for the application
logger = structlog.get_logger()
