"""
Owning-party scope for service calls made during provisioning.

Stock location, payment method and role creation are only allowed for the
owner (seller) of the tenant they act on. During registration the incoming
context belongs to the default tenant, so each such call runs with a scoped
copy of the context pointing at the new tenant and its seller.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Any, Callable, Dict, Generator, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..config import get_config
from ..context.request_context import RequestContext
from ..context.tenant_context import TenantContext, tenant_context
from ..db.db_access_models import Administrator
from ..db.db_tenant_models import Seller, Tenant
from ..exceptions import ErrorCode, ServiceError
from ..utils.logger import get_logger

T = TypeVar("T")


class ScopeErrorCode(str, Enum):
    TENANT_NOT_FOUND = "TENANT_NOT_FOUND"
    TENANT_HAS_NO_OWNER = "TENANT_HAS_NO_OWNER"
    OWNING_PARTY_NOT_FOUND = "OWNING_PARTY_NOT_FOUND"
    ADMINISTRATOR_NOT_FOUND = "ADMINISTRATOR_NOT_FOUND"


class ProvisioningScopeError(ServiceError):
    """Raised when a scope cannot be built for a tenant."""

    def __init__(self, scope_code: ScopeErrorCode, message: str, **context: Any):
        self.scope_code = scope_code
        error_code = (
            ErrorCode.PRECONDITION_FAILED
            if scope_code == ScopeErrorCode.TENANT_HAS_NO_OWNER
            else ErrorCode.NOT_FOUND
        )
        super().__init__(
            message,
            error_code=error_code,
            operation="owning_party_scope",
            scope_code=scope_code.value,
            **context,
        )


class ProvisioningContextAdapter:
    def __init__(self):
        self.logger = get_logger()

    def _debug_enabled(self, enable_debug_logging: Optional[bool]) -> bool:
        if enable_debug_logging is None:
            return get_config().features.enable_scope_debug_logging
        return enable_debug_logging

    @contextmanager
    def owning_party_scope(
        self,
        ctx: RequestContext,
        tenant_id: str,
        enable_debug_logging: Optional[bool] = None,
        operation_name: str = "operation",
    ) -> Generator[RequestContext, None, None]:
        """
        Yield a copy of ``ctx`` acting on ``tenant_id`` as its owning party.

        ``ctx`` itself is untouched. The thread's current tenant is switched
        for the block and restored afterwards.

        Raises:
            ProvisioningScopeError: TENANT_NOT_FOUND or TENANT_HAS_NO_OWNER
        """
        debug = self._debug_enabled(enable_debug_logging)
        if debug:
            self.logger.debug(
                f"Entering owning-party scope for {operation_name}",
                extra={"tenant_id": tenant_id, "outer_tenant_id": ctx.tenant_id},
            )

        tenant = self.validate_tenant_exists(ctx, tenant_id)
        scoped = ctx.scoped_to(tenant.id, tenant.seller_id)

        if debug:
            self.logger.debug(
                f"Resolved owning party for {operation_name}",
                extra={"tenant_id": tenant.id, "owning_party_id": tenant.seller_id},
            )

        with tenant_context(tenant.id):
            try:
                yield scoped
            except Exception as e:
                self.logger.error(
                    f"{operation_name} failed in owning-party scope: {str(e)}",
                    extra={"tenant_id": tenant.id, "operation_name": operation_name},
                )
                raise

        if debug:
            self.logger.debug(
                f"Exited owning-party scope for {operation_name}", extra={"tenant_id": tenant.id}
            )

    def with_owning_party_scope(
        self,
        ctx: RequestContext,
        tenant_id: str,
        fn: Callable[[RequestContext], T],
        enable_debug_logging: Optional[bool] = None,
        operation_name: str = "operation",
    ) -> T:
        """Call ``fn`` with a context scoped to ``tenant_id`` and its owning party."""
        with self.owning_party_scope(
            ctx, tenant_id, enable_debug_logging, operation_name
        ) as scoped:
            return fn(scoped)

    def validate_tenant_exists(self, ctx: RequestContext, tenant_id: str) -> Tenant:
        """Load ``tenant_id`` with its seller; it must exist and have an owner."""
        tenant = ctx.session.execute(
            select(Tenant).where(Tenant.id == tenant_id).options(selectinload(Tenant.seller))
        ).scalar_one_or_none()
        if tenant is None:
            raise ProvisioningScopeError(
                ScopeErrorCode.TENANT_NOT_FOUND,
                f"Tenant {tenant_id} not found",
                tenant_id=tenant_id,
            )
        if tenant.seller_id is None or tenant.seller is None:
            raise ProvisioningScopeError(
                ScopeErrorCode.TENANT_HAS_NO_OWNER,
                f"Tenant {tenant_id} has no owning party",
                tenant_id=tenant_id,
            )
        return tenant

    def validate_seller_exists(self, ctx: RequestContext, seller_id: str) -> Seller:
        seller = ctx.session.get(Seller, seller_id)
        if seller is None:
            raise ProvisioningScopeError(
                ScopeErrorCode.OWNING_PARTY_NOT_FOUND,
                f"Owning party {seller_id} not found",
                seller_id=seller_id,
            )
        return seller

    def validate_administrator_exists(
        self, ctx: RequestContext, administrator_id: str
    ) -> Administrator:
        administrator = ctx.session.get(Administrator, administrator_id)
        if administrator is None:
            raise ProvisioningScopeError(
                ScopeErrorCode.ADMINISTRATOR_NOT_FOUND,
                f"Administrator {administrator_id} not found",
                administrator_id=administrator_id,
            )
        return administrator

    def get_context_info(self, ctx: RequestContext) -> Dict[str, Any]:
        """Diagnostic snapshot of ``ctx`` and the thread's current tenant."""
        return {
            **ctx.describe(),
            "thread_tenant_id": TenantContext.get_current_tenant_id(),
            "has_owning_party_scope": bool(ctx.tenant_id and ctx.owning_party_id),
        }
