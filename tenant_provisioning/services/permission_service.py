"""
Per-session cache of the tenants each acting user may manage.

The cache is filled on first use and kept for the life of the session.
Tenants attached to a user's roles later in the same session are not seen
until ``invalidate`` is called.
"""

from typing import Optional, Set

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..context.request_context import RequestContext
from ..db.db_access_models import role_tenants, user_roles
from ..db.db_tenant_models import Tenant
from ..utils.logger import get_logger

CACHE_KEY = "permitted_tenant_ids"


class PermissionService:
    def __init__(self):
        self.logger = get_logger()

    @staticmethod
    def _cache_key(ctx: RequestContext) -> Optional[str]:
        if ctx.active_user_id:
            return f"user:{ctx.active_user_id}"
        if ctx.owning_party_id:
            return f"party:{ctx.owning_party_id}"
        return None

    def _load(self, ctx: RequestContext) -> Set[str]:
        if ctx.active_user_id:
            stmt = (
                select(role_tenants.c.tenant_id)
                .join(user_roles, user_roles.c.role_id == role_tenants.c.role_id)
                .where(user_roles.c.user_id == ctx.active_user_id)
            )
        else:
            stmt = select(Tenant.id).where(Tenant.seller_id == ctx.owning_party_id)
        return {str(tenant_id) for tenant_id in ctx.session.execute(stmt).scalars()}

    def permitted_tenant_ids(self, ctx: RequestContext) -> Set[str]:
        """Tenant ids the acting user (or owning party) may manage."""
        key = self._cache_key(ctx)
        if key is None:
            return set()

        cache = ctx.session.info.setdefault(CACHE_KEY, {})
        if key not in cache:
            cache[key] = self._load(ctx)
            self.logger.debug(
                "Permission cache loaded", extra={"cache_key": key, "tenant_count": len(cache[key])}
            )
        return cache[key]

    def can_manage(self, ctx: RequestContext, tenant_id: str) -> bool:
        return str(tenant_id) in self.permitted_tenant_ids(ctx)

    @staticmethod
    def invalidate(session: Session) -> None:
        session.info.pop(CACHE_KEY, None)
