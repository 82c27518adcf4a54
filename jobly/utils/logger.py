"""
Logging Configuration

Structured logging setup using structlog for consistent, JSON-formatted logs
throughout the Jobly backend.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.stdlib import LoggerFactory
from pythonjsonlogger import jsonlogger

from jobly.core.config import get_settings

# Get settings
settings = get_settings()


def configure_logging() -> None:
    """Configure structured logging for the application."""

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,

            # JSON formatting for production, pretty for development
            structlog.dev.ConsoleRenderer() if settings.DEBUG
            else structlog.processors.JSONRenderer(default=str)
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )

    # File handler for persistent logging
    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(
            jsonlogger.JsonFormatter(
                "%(asctime)s %(name)s %(levelname)s %(message)s"
            )
        )
        logging.getLogger().addHandler(file_handler)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name)


def log_database_operation(
    operation: str,
    table: str,
    record_id: Optional[Any] = None,
    **kwargs
) -> None:
    """
    Log a write against the store.

    Args:
        operation: Type of operation (create, update, delete)
        table: Database table involved
        record_id: Key of the affected row
        **kwargs: Additional operation data
    """
    logger = get_logger("database")
    logger.info(
        "Database operation",
        operation=operation,
        table=table,
        record_id=record_id,
        **kwargs
    )


def log_security_event(
    event_type: str,
    username: Optional[str] = None,
    success: bool = True,
    **kwargs
) -> None:
    """
    Log security-related event.

    Args:
        event_type: Type of security event
        username: Username involved
        success: Whether the event was successful
        **kwargs: Additional security data
    """
    logger = get_logger("security")

    log_level = "info" if success else "warning"
    getattr(logger, log_level)(
        "Security event",
        event_type=event_type,
        username=username,
        success=success,
        **kwargs
    )


# Configure logging on import
configure_logging()
