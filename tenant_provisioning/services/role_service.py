from typing import Optional

from sqlalchemy import select

from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_access_models import Role
from ..db.db_tenant_models import Tenant
from ..exceptions import duplicate, permission_denied
from ..schemas.entity_schemas import RoleCreate
from .base_service import BaseService
from .permission_service import PermissionService


class RoleService(BaseService):
    """
    Creates roles.

    Every tenant the new role is granted on must be one the acting user can
    already manage, as reported by the permission cache.
    """

    def __init__(self, permission_service: Optional[PermissionService] = None, logger=None):
        super().__init__(logger)
        self.permission_service = permission_service or PermissionService()

    @operation()
    def create(self, ctx: RequestContext, data: RoleCreate) -> Role:
        try:
            for tenant_id in data.tenant_ids:
                if not self.permission_service.can_manage(ctx, tenant_id):
                    raise permission_denied(
                        "assign_role",
                        "Tenant",
                        tenant_id=tenant_id,
                        active_user_id=ctx.active_user_id,
                    )

            if self.find_by_code(ctx, data.code) is not None:
                raise duplicate("Role", code=data.code)

            tenants = [ctx.session.get(Tenant, tenant_id) for tenant_id in data.tenant_ids]
            role = Role(
                code=data.code,
                description=data.description,
                permissions=list(data.permissions),
                tenants=[tenant for tenant in tenants if tenant is not None],
            )
            ctx.session.add(role)
            ctx.session.flush()

            self.logger.info(
                f"Created role: {role.code}",
                extra={"role_id": role.id, "tenant_ids": data.tenant_ids},
            )
            return role
        except Exception as e:
            self._handle_service_exception("create_role", e, data.code)

    def find_by_code(self, ctx: RequestContext, code: str) -> Optional[Role]:
        return ctx.session.execute(select(Role).where(Role.code == code)).scalar_one_or_none()
