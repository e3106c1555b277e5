"""
Tests for AuditService.
"""

from sqlalchemy import select

from tenant_provisioning.config import AppConfig, FeatureFlags, QueueConfig, set_config
from tenant_provisioning.db import AuditLog
from tenant_provisioning.services import AuditService


class TestAuditService:
    def test_log_uses_context_tenant(self, db_session, ctx):
        entry = AuditService().log(ctx, "tenant.created", "Tenant", "t-1", data={"code": "acme"})

        stored = db_session.execute(select(AuditLog)).scalar_one()
        assert stored is entry
        assert stored.tenant_id == ctx.tenant_id
        assert stored.data == {"code": "acme"}

    def test_explicit_tenant_overrides_context(self, ctx):
        entry = AuditService().log(
            ctx, "role.created", "Role", "r-1", tenant_id="t-2", user_id="u-1"
        )

        assert entry.tenant_id == "t-2"
        assert entry.user_id == "u-1"
        assert entry.data == {}

    def test_disabled(self, db_session, ctx):
        set_config(
            AppConfig(
                queue=QueueConfig(connection_string=""),
                features=FeatureFlags(enable_audit_logging=False),
            )
        )

        assert AuditService().log(ctx, "tenant.created", "Tenant", "t-1") is None
        assert db_session.execute(select(AuditLog)).first() is None
