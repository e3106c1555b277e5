"""
Registration error taxonomy.

Every failure of the registration pipeline surfaces as a ``RegistrationError``
whose string form is ``REGISTRATION_<CODE>: <message>``, so callers (and the
GraphQL layer in front of them) can branch on the code without parsing
exception types.
"""

from enum import Enum
from typing import Any, Optional

from ..exceptions import BaseError, ErrorCode

REGISTRATION_PREFIX = "REGISTRATION_"


class RegistrationErrorCode(str, Enum):
    CURRENCY_INVALID = "CURRENCY_INVALID"
    CODE_EXISTS = "CODE_EXISTS"
    ZONES_MISSING = "ZONES_MISSING"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    TENANT_CREATE_FAILED = "TENANT_CREATE_FAILED"
    STORE_NAME_REQUIRED = "STORE_NAME_REQUIRED"
    STOCK_LOCATION_CREATE_FAILED = "STOCK_LOCATION_CREATE_FAILED"
    STOCK_LOCATION_ASSIGN_FAILED = "STOCK_LOCATION_ASSIGN_FAILED"
    PAYMENT_HANDLER_MISSING = "PAYMENT_HANDLER_MISSING"
    PAYMENT_METHOD_CREATE_FAILED = "PAYMENT_METHOD_CREATE_FAILED"
    PAYMENT_METHOD_ASSIGN_FAILED = "PAYMENT_METHOD_ASSIGN_FAILED"
    ROLE_CREATE_FAILED = "ROLE_CREATE_FAILED"
    ROLE_ASSIGN_FAILED = "ROLE_ASSIGN_FAILED"
    USER_CREATE_FAILED = "USER_CREATE_FAILED"
    USER_ASSIGN_FAILED = "USER_ASSIGN_FAILED"
    ADMIN_CREATE_FAILED = "ADMIN_CREATE_FAILED"
    PROVISIONING_FAILED = "PROVISIONING_FAILED"


# Registration code -> (generic error code, status code)
_CLASSIFICATION = {
    RegistrationErrorCode.CURRENCY_INVALID: (ErrorCode.VALIDATION_FAILED, 400),
    RegistrationErrorCode.CODE_EXISTS: (ErrorCode.DUPLICATE, 409),
    RegistrationErrorCode.EMAIL_EXISTS: (ErrorCode.DUPLICATE, 409),
    RegistrationErrorCode.ZONES_MISSING: (ErrorCode.PRECONDITION_FAILED, 412),
    RegistrationErrorCode.STORE_NAME_REQUIRED: (ErrorCode.MISSING_REQUIRED, 400),
    RegistrationErrorCode.PAYMENT_HANDLER_MISSING: (ErrorCode.CONFIGURATION_ERROR, 500),
    RegistrationErrorCode.STOCK_LOCATION_ASSIGN_FAILED: (ErrorCode.CONFLICT, 500),
    RegistrationErrorCode.PAYMENT_METHOD_ASSIGN_FAILED: (ErrorCode.CONFLICT, 500),
    RegistrationErrorCode.ROLE_ASSIGN_FAILED: (ErrorCode.CONFLICT, 500),
    RegistrationErrorCode.USER_ASSIGN_FAILED: (ErrorCode.CONFLICT, 500),
}


class RegistrationError(BaseError):
    """A registration pipeline failure tagged with a ``RegistrationErrorCode``."""

    def __init__(
        self,
        code: RegistrationErrorCode,
        message: str,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        self.code = RegistrationErrorCode(code)
        error_code, status_code = _CLASSIFICATION.get(
            self.code, (ErrorCode.INTERNAL_ERROR, 500)
        )
        super().__init__(
            message,
            error_code=error_code,
            status_code=status_code,
            cause=cause,
            registration_code=self.code.value,
            **context,
        )

    def _render_message(self) -> str:
        return f"{REGISTRATION_PREFIX}{self.code.value}: {self.message}"


def create_error(
    code: RegistrationErrorCode, message: str, cause: Optional[Exception] = None, **context: Any
) -> RegistrationError:
    return RegistrationError(code, message, cause=cause, **context)


def is_registration_error(error: BaseException) -> bool:
    """True for RegistrationError or any exception whose message is already coded."""
    return isinstance(error, RegistrationError) or str(error).startswith(REGISTRATION_PREFIX)


def wrap_error(
    error: BaseException, code: RegistrationErrorCode, context_message: Optional[str] = None
) -> BaseException:
    """
    Tag ``error`` with ``code`` unless it already carries a registration code.

    Returns the exception to raise.
    """
    if is_registration_error(error):
        return error

    detail = str(error) or type(error).__name__
    message = f"{context_message}: {detail}" if context_message else detail
    return RegistrationError(code, message, cause=error if isinstance(error, Exception) else None)


def log_error(logger, source: str, error: BaseException, operation: str, **context: Any) -> None:
    """Log a pipeline failure once, at the step where it happened."""
    logger.error(
        f"[{source}] {operation} failed: {error}",
        extra={
            "source": source,
            "error_type": type(error).__name__,
            "registration_code": getattr(getattr(error, "code", None), "value", None),
            **context,
        },
    )
