"""
Base service implementation with common functionality for all services.
"""

from typing import Any, NoReturn, Optional

from ..exceptions import (
    BaseError,
    ErrorCode,
    RepositoryError,
    ServiceError,
    permission_denied,
)
from ..utils.logger import get_logger


class BaseService:
    """Base service with shared logging and error handling."""

    def __init__(self, logger: Optional[Any] = None):
        self.logger = logger or get_logger()

    def _handle_service_exception(
        self, operation: str, exception: Exception, entity_id: Optional[str] = None  # noqa
    ) -> NoReturn:
        """
        Handle and log service exceptions consistently.

        Coded errors raised by this layer pass through unchanged. A NOT_FOUND
        RepositoryError becomes a NOT_FOUND ServiceError; anything else is
        wrapped as INTERNAL_ERROR.
        """
        if isinstance(exception, ServiceError):
            raise exception
        if isinstance(exception, RepositoryError) and exception.error_code in (
            ErrorCode.NOT_FOUND,
            ErrorCode.DUPLICATE,
        ):
            self.logger.warning(
                f"{exception.error_code.name} in {operation}",
                extra={
                    "operation": operation,
                    "entity_id": entity_id,
                    "error_details": str(exception),
                },
            )
            raise ServiceError(
                str(exception),
                error_code=exception.error_code,
                operation=operation,
                entity_id=entity_id,
                cause=exception,
            )
        if isinstance(exception, BaseError):
            raise exception

        error_msg = f"Error in {operation}: {str(exception)}"
        self.logger.error(
            error_msg,
            extra={
                "operation": operation,
                "entity_id": entity_id,
                "error_type": type(exception).__name__,
                "error_details": str(exception),
            },
            exc_info=True,
        )
        raise ServiceError(
            error_msg,
            error_code=ErrorCode.INTERNAL_ERROR,
            operation=operation,
            entity_id=entity_id,
            cause=exception,
        )

    def _require_owning_party_scope(self, ctx, operation: str):
        """
        Check ``ctx`` acts for the owner of its active tenant.

        Returns:
            The active Tenant

        Raises:
            ServiceError: PERMISSION_DENIED when the scope is missing or belongs
                to another owning party, NOT_FOUND when the tenant is gone
        """
        from ..db.db_tenant_models import Tenant

        if not ctx.tenant_id or not ctx.owning_party_id:
            raise permission_denied(
                operation,
                "Tenant",
                tenant_id=ctx.tenant_id,
                owning_party_id=ctx.owning_party_id,
            )

        tenant = ctx.session.get(Tenant, ctx.tenant_id)
        if tenant is None:
            raise ServiceError(
                f"Tenant not found: tenant_id={ctx.tenant_id}",
                error_code=ErrorCode.NOT_FOUND,
                operation=operation,
            )
        if tenant.seller_id != ctx.owning_party_id:
            raise permission_denied(
                operation,
                "Tenant",
                tenant_id=ctx.tenant_id,
                owning_party_id=ctx.owning_party_id,
                tenant_seller_id=tenant.seller_id,
            )
        return tenant
