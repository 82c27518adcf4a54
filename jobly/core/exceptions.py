"""
Custom Exceptions for Jobly

Domain exceptions raised by the repositories, with the HTTP status each one
maps to and the error envelope the API returns to clients.
"""

from typing import Optional, Dict, Any
from enum import Enum

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from jobly.utils.logger import get_logger

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """Error severity levels for monitoring and alerting."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ErrorCategory(Enum):
    """Error categories for classification and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    SYSTEM = "system"


class BaseApplicationException(Exception):
    """
    Base exception for all application-specific errors.

    Carries the HTTP status the collaborator layer should answer with, so
    callers never need to inspect message text to pick a status code.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.category = category
        self.severity = severity
        self.http_status = http_status
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Body of the ``error`` envelope sent to API clients."""
        return {
            "message": self.message,
            "status": self.http_status
        }


class BadRequestException(BaseApplicationException):
    """Invalid input, empty update, bad filter range or duplicate key."""

    def __init__(self, message: str = "Bad Request", **kwargs):
        kwargs.setdefault("error_code", "BAD_REQUEST")
        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.LOW,
            http_status=status.HTTP_400_BAD_REQUEST,
            **kwargs
        )


class UnauthorizedException(BaseApplicationException):
    """Failed credential check or disallowed privilege change."""

    def __init__(self, message: str = "Unauthorized", **kwargs):
        kwargs.setdefault("error_code", "UNAUTHORIZED")
        super().__init__(
            message=message,
            category=ErrorCategory.AUTHENTICATION,
            severity=ErrorSeverity.MEDIUM,
            http_status=status.HTTP_401_UNAUTHORIZED,
            **kwargs
        )


class NotFoundException(BaseApplicationException):
    """Missing entity by key."""

    def __init__(self, message: str = "Not Found", **kwargs):
        kwargs.setdefault("error_code", "RESOURCE_NOT_FOUND")
        super().__init__(
            message=message,
            category=ErrorCategory.NOT_FOUND,
            severity=ErrorSeverity.LOW,
            http_status=status.HTTP_404_NOT_FOUND,
            **kwargs
        )


async def application_exception_handler(
    request: Request,
    exc: BaseApplicationException
) -> JSONResponse:
    """Render a domain error as ``{"error": {"message", "status"}}``."""
    logger.info(
        "Application error",
        error_code=exc.error_code,
        status=exc.http_status,
        path=request.url.path
    )
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.to_dict()}
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide store and programming errors behind a generic 500."""
    logger.error(f"Unhandled exception: {exc}", path=request.url.path, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Internal server error",
                "status": status.HTTP_500_INTERNAL_SERVER_ERROR
            }
        }
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the Jobly error envelope on a FastAPI application."""
    app.add_exception_handler(BaseApplicationException, application_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
