"""
Consolidated exception system with error codes, context, and correlation support.

This module provides a unified exception hierarchy for the provisioning
pipeline, with automatic logging and correlation ID tracking. Registration
specific errors live in ``provisioning.registration_errors`` and build on
``BaseError`` defined here.
"""

import threading
import traceback
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

# Removed logger import to avoid circular dependency - logger is imported lazily

_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONNECTION_ERROR = "1002"
    CONFIGURATION_ERROR = "1003"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"
    CONFLICT = "3002"

    # Business logic errors (4xxx)
    BUSINESS_RULE_VIOLATION = "4000"
    PERMISSION_DENIED = "4003"
    PRECONDITION_FAILED = "4004"

    # External service errors (5xxx)
    QUEUE_ERROR = "5001"
    INTEGRATION_ERROR = "5003"


class BaseError(Exception):
    """Base exception with context, error codes, logging, and error chaining."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        """
        Initialize base error with rich context.

        Args:
            message: Human-readable error message
            error_code: Standardized error code from ErrorCode enum
            status_code: HTTP-style status code used to pick the log level
            cause: Original exception that caused this error
            **context: Additional context information
        """
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_id = str(uuid.uuid4())
        self.context = context

        correlation_id = get_correlation_id()
        if correlation_id:
            self.context["correlation_id"] = correlation_id

        self.context["error_id"] = self.error_id

        if cause:
            self.context["cause"] = {
                "type": type(cause).__name__,
                "message": str(cause),
                "traceback": traceback.format_exception(type(cause), cause, cause.__traceback__),
            }

        self._log_error()

        super().__init__(self._render_message())

    def _render_message(self) -> str:
        """Text used for ``str(error)``."""
        return self.message

    def _log_error(self) -> None:
        """Log error with appropriate level based on status code."""
        # Import logger here to avoid circular dependency at module load time
        from .utils.logger import get_logger

        logger = get_logger()

        log_data = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            "error_message": self.message,
            "timestamp": self.timestamp,
        }
        if "correlation_id" in self.context:
            log_data["correlation_id"] = self.context["correlation_id"]

        if self.status_code >= 500:
            logger.error(f"Error {self.error_code.value}: {self.message}", extra=log_data)
        elif self.status_code >= 400:
            logger.warning(f"Client error {self.error_code.value}: {self.message}", extra=log_data)
        else:
            logger.info(f"Error {self.error_code.value}: {self.message}", extra=log_data)

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """
        Convert to dict for API responses.

        Args:
            include_cause: Include cause information (useful for debugging)

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        result: Dict[str, Any] = {
            "error": {
                "id": self.error_id,
                "code": self.error_code.value,
                "message": str(self),
                "timestamp": self.timestamp,
                "context": {
                    k: v
                    for k, v in self.context.items()
                    if k not in ["cause", "error_id", "correlation_id"]
                },
            }
        }

        if "correlation_id" in self.context:
            result["error"]["correlation_id"] = self.context["correlation_id"]

        if include_cause and "cause" in self.context:
            result["error"]["cause"] = {
                "type": self.context["cause"]["type"],
                "message": self.context["cause"]["message"],
            }

        return result

    def add_context(self, **kwargs: Any) -> "BaseError":
        """
        Add additional context to the error (fluent interface).

        Returns:
            Self for method chaining
        """
        self.context.update(kwargs)
        return self


class RepositoryError(BaseError):
    """Data access errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        status_code: int = 500,
        cause: Optional[Exception] = None,
        **context,
    ):
        super().__init__(message, error_code, status_code, cause, **context)


class ServiceError(BaseError):
    """Service layer errors."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context,
    ):
        if operation:
            context["operation"] = operation
        status_code = {
            ErrorCode.NOT_FOUND: 404,
            ErrorCode.DUPLICATE: 409,
            ErrorCode.PERMISSION_DENIED: 403,
        }.get(error_code, 500)
        super().__init__(message, error_code, status_code, cause, **context)


class ValidationError(BaseError):
    """Validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        cause: Optional[Exception] = None,
        **context,
    ):
        if field:
            context["field"] = field
        super().__init__(message, error_code, 400, cause, **context)


def duplicate(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """Factory for duplicate resource errors (409)."""
    id_parts = [f"{k}={v}" for k, v in identifiers.items()]
    message = f"Duplicate {resource_type}"
    if id_parts:
        message += f": {', '.join(id_parts)}"

    return RepositoryError(
        message,
        error_code=ErrorCode.DUPLICATE,
        status_code=409,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def permission_denied(
    action: str, resource: str, cause: Optional[Exception] = None, **context
) -> ServiceError:
    """
    Factory for permission denied errors.

    Args:
        action: Action that was denied (e.g., 'create', 'assign')
        resource: Resource being accessed
        cause: Original exception if any
        **context: Additional context

    Returns:
        Configured ServiceError instance
    """
    return ServiceError(
        f"Permission denied: {action} on {resource}",
        error_code=ErrorCode.PERMISSION_DENIED,
        cause=cause,
        action=action,
        resource=resource,
        **context,
    )


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current thread."""
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    """Get the current thread's correlation ID."""
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    """Clear the current thread's correlation ID."""
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
