"""
Structured logging configuration using structlog.

Standardized log format:
{
    "ts": "2025-11-18T04:30:00.123456Z",
    "level": "info",
    "service": "event-receiver",
    "delivery_tag": 17,
    "event": "event.rendered",
    "module": "dispatcher",
    "func_name": "handle",
    "lineno": 42,
    ...additional context...
}

Logs go to stderr so that rendered reports on stdout stay clean.
"""
import logging
import sys
from typing import Any

import structlog


def add_service_name(service_name: str):
    """Build a processor stamping the service name on every entry."""

    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict["service"] = service_name
        return event_dict

    return processor


def setup_logging(json_output: bool = True, service_name: str = "event-receiver", level: str = "INFO"):
    """
    Configure structured logging with standardized fields.

    Args:
        json_output: If True, output JSON logs. If False, use console format.
        service_name: Name of the service stamped on every entry.
        level: Minimum log level name.
    """
    log_level = logging.getLevelName(level.upper())

    shared_processors = [
        # Per-message context (delivery_tag, message_id) bound by the dispatcher
        structlog.contextvars.merge_contextvars,
        add_service_name(service_name),
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors = shared_processors + [structlog.processors.JSONRenderer()]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Route stdlib loggers (kombu, uvicorn) to stderr as plain lines
    logging.basicConfig(format="%(message)s", level=log_level, stream=sys.stderr)
    logging.getLogger("kombu").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("amqp").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("uvicorn.access").handlers = []


def get_logger():
    """Get a configured structlog logger."""
    return structlog.get_logger()
