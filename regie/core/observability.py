"""
Observability Infrastructure

Structured logging with correlation tracking for the staffing engine.
Every request handled by the API binds a correlation id and the acting user
so that log lines emitted by services can be tied back to one operation.
"""

import contextvars
import logging
import sys
import uuid
from typing import Any

import structlog

from .config import settings

# Context variables for correlation tracking
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)
actor_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "actor_id", default=""
)


class CorrelationIdProcessor:
    """Structlog processor to add correlation ID to all log entries."""

    def __call__(
        self, logger: Any, name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        correlation_id = correlation_id_var.get("")
        actor_id = actor_id_var.get("")

        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        if actor_id:
            event_dict["actor_id"] = actor_id

        return event_dict


def setup_structured_logging() -> None:
    """Configure structured logging with JSON or console output."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        CorrelationIdProcessor(),
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
    ]

    if settings.LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=settings.ENVIRONMENT == "local")
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if settings.SQL_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
    else:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set correlation ID for request tracking."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    correlation_id_var.set(correlation_id)
    return correlation_id


def set_actor_id(actor_id: str) -> None:
    """Set the acting user for request tracking."""
    actor_id_var.set(actor_id)


def get_correlation_id() -> str:
    """Get current correlation ID."""
    return correlation_id_var.get("")
