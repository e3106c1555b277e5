"""
Tenant service.
"""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_tenant_models import Tenant
from ..exceptions import duplicate
from ..schemas.entity_schemas import TenantCreate
from .base_service import BaseService


class TenantService(BaseService):
    """
    Service for managing tenants.
    """

    @operation()
    def create(self, ctx: RequestContext, data: TenantCreate) -> Tenant:
        """
        Create a tenant.

        Raises:
            ServiceError: DUPLICATE if the code is taken, INTERNAL_ERROR otherwise
        """
        try:
            if self.find_by_code(ctx, data.code) is not None:
                raise duplicate("Tenant", code=data.code)

            tenant = Tenant(**data.model_dump(mode="json"))
            ctx.session.add(tenant)
            ctx.session.flush()

            self.logger.info(
                f"Created tenant: {tenant.code}",
                extra={"tenant_id": tenant.id, "tenant_code": tenant.code},
            )
            return tenant
        except Exception as e:
            self._handle_service_exception("create_tenant", e, data.code)

    def find_one(
        self, ctx: RequestContext, tenant_id: str, relations: Optional[Sequence[str]] = None
    ) -> Optional[Tenant]:
        """Load a tenant by id, optionally eager loading ``relations``."""
        stmt = select(Tenant).where(Tenant.id == tenant_id)
        for relation in relations or ():
            stmt = stmt.options(selectinload(getattr(Tenant, relation)))
        return ctx.session.execute(stmt).scalar_one_or_none()

    def find_by_code(self, ctx: RequestContext, code: str) -> Optional[Tenant]:
        return ctx.session.execute(select(Tenant).where(Tenant.code == code)).scalar_one_or_none()

    def find_first(self, ctx: RequestContext) -> Optional[Tenant]:
        """Oldest tenant in the system."""
        return ctx.session.execute(
            select(Tenant).order_by(Tenant.created_at, Tenant.id).limit(1)
        ).scalar_one_or_none()

    def find_all(self, ctx: RequestContext) -> List[Tenant]:
        return list(ctx.session.execute(select(Tenant).order_by(Tenant.created_at)).scalars())
