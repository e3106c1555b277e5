"""
Tenant context management.

Tracks the tenant a thread is currently working for so that log records and
errors can be stamped with it. The request context carried through the
provisioners is the source of truth for data access; this thread-local only
mirrors it for observability.
"""

import threading
from contextlib import contextmanager
from typing import Generator, Optional

from ..exceptions import ErrorCode, ValidationError
from ..utils.logger import get_logger


class TenantContext:
    """
    Manages the current tenant id using thread-local storage.
    """

    _thread_local = threading.local()
    _logger = get_logger()

    @classmethod
    def set_current_tenant(cls, tenant_id: str) -> None:
        """
        Set the current tenant ID for the execution context.

        Raises:
            ValidationError: If tenant_id is empty or not a string
        """
        if not tenant_id or not isinstance(tenant_id, str) or not tenant_id.strip():
            raise ValidationError(
                "tenant_id must be a non-empty string",
                error_code=ErrorCode.MISSING_REQUIRED,
                field="tenant_id",
                value=tenant_id,
            )

        cls._thread_local.tenant_id = tenant_id.strip()
        cls._logger.debug(f"Current tenant set to: {tenant_id}")

    @classmethod
    def get_current_tenant_id(cls) -> Optional[str]:
        """Get the current tenant ID, or None if not set."""
        return getattr(cls._thread_local, "tenant_id", None)

    @classmethod
    def clear_current_tenant(cls) -> None:
        """Clear the current tenant ID from the execution context."""
        if hasattr(cls._thread_local, "tenant_id"):
            delattr(cls._thread_local, "tenant_id")
        cls._logger.debug("Current tenant cleared")


@contextmanager
def tenant_context(tenant_id: Optional[str]) -> Generator[None, None, None]:
    """
    Set the current tenant for the duration of the block.

    The previous tenant (or its absence) is restored on every exit path. A
    falsy ``tenant_id`` clears the current tenant for the block.
    """
    previous_tenant = TenantContext.get_current_tenant_id()
    if tenant_id:
        TenantContext.set_current_tenant(tenant_id)
    else:
        TenantContext.clear_current_tenant()
    try:
        yield
    finally:
        if previous_tenant:
            TenantContext.set_current_tenant(previous_tenant)
        else:
            TenantContext.clear_current_tenant()
