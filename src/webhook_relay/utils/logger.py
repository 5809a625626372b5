"""
Module: logger.py
Description: Structured logging configuration for the webhook relay.

Configures structlog for JSON output so that delivery attempts,
subscription changes and request errors can be searched by field
in CloudWatch Logs.

Key Components:
- JSON output with timestamp and level processors
- Level filtering driven by LOG_LEVEL
- get_logger() helper function

Dependencies: structlog, logging, datetime
"""

import logging

import structlog
from datetime import datetime, timezone

from webhook_relay.config.settings import settings


def _add_timestamp(logger, method_name, event_dict):
    """Add an ISO 8601 UTC timestamp to log entries."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _add_log_level(logger, method_name, event_dict):
    """Add the upper-cased log level to the event dictionary."""
    event_dict["level"] = method_name.upper()
    return event_dict


structlog.configure(
    processors=[
        _add_timestamp,
        _add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.WriteLoggerFactory(),
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level)
    ),
    cache_logger_on_first_use=True,
)


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Subscription created", bucket_name="b1", rule_name="r1")
        {"bucket_name": "b1", "rule_name": "r1", "event": "Subscription created", "timestamp": "...", "level": "INFO"}
    """
    return structlog.get_logger(name)
