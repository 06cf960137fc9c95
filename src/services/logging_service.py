"""Structured logging configuration with API key redaction."""

import logging
import re
import sys
from typing import Any, Dict, Optional, TextIO

import structlog

SENSITIVE_KEYS = {
    "api_key",
    "openweathermap_api_key",
    "appid",
    "authorization",
    "secret",
    "password",
}

# Provider URLs carry the key as a query parameter, e.g. "...?appid=abc123&q=..."
APPID_PATTERN = re.compile(r"(appid=)[^&\s'\"]+", re.IGNORECASE)


def redact_sensitive(
    logger: Any, method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Redact sensitive information from log entries.

    Redacts:
    - api_key / appid fields
    - Authorization headers
    - Any field containing 'secret' or 'password'
    - `appid=` query values embedded in string fields (URLs, error text)
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            event_dict[key] = "REDACTED"
        elif isinstance(event_dict[key], str):
            event_dict[key] = APPID_PATTERN.sub(r"\1REDACTED", event_dict[key])

    return event_dict


def configure_logging(log_level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Configure structlog for JSON output with correlation ID support.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream, stdout if not given
    """
    stream = stream or sys.stdout
    level = getattr(logging, log_level.upper(), logging.INFO)

    # httpx logs full request URLs (including appid) at INFO
    logging.basicConfig(format="%(message)s", stream=stream, level=level)
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional logger name for context

    Returns:
        Configured structlog logger
    """
    logger = structlog.get_logger()
    if name:
        logger = logger.bind(logger_name=name)
    return logger
