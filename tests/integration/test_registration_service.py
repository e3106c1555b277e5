"""
End-to-end registration tests against an in-memory database.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import func, select

from tenant_provisioning import ProvisionResult, RegistrationError, RegistrationErrorCode
from tenant_provisioning.context import RequestContext
from tenant_provisioning.db import (
    Administrator,
    AuditLog,
    PaymentMethod,
    Role,
    StockLocation,
    Tenant,
    User,
    role_tenants,
    tenant_payment_methods,
    tenant_stock_locations,
    user_roles,
)
from tenant_provisioning.provisioning import (
    AccessProvisioner,
    PaymentProvisioner,
    RegistrationService,
    RoleProvisioner,
    StoreProvisioner,
    TenantProvisioner,
)
from tenant_provisioning.services import PermissionService
from tests.fixtures.factories import RegistrationInputFactory, SellerFactory, seed_platform

pytestmark = pytest.mark.integration

COUNTED_TABLES = (
    Tenant.__table__,
    StockLocation.__table__,
    PaymentMethod.__table__,
    Role.__table__,
    User.__table__,
    Administrator.__table__,
    AuditLog.__table__,
    role_tenants,
    user_roles,
    tenant_stock_locations,
    tenant_payment_methods,
)


def _row_counts(db_manager):
    with db_manager.transaction() as session:
        return {
            table.name: session.execute(select(func.count()).select_from(table)).scalar_one()
            for table in COUNTED_TABLES
        }


def _audit_event_types(session, tenant_id):
    return sorted(
        session.execute(
            select(AuditLog.event_type).where(AuditLog.tenant_id == tenant_id)
        ).scalars()
    )


def _mocked_steps():
    return {
        "tenant_provisioner": MagicMock(spec=TenantProvisioner),
        "store_provisioner": MagicMock(spec=StoreProvisioner),
        "payment_provisioner": MagicMock(spec=PaymentProvisioner),
        "role_provisioner": MagicMock(spec=RoleProvisioner),
        "access_provisioner": MagicMock(spec=AccessProvisioner),
    }


class TestProvisionCustomer:
    """A registration builds a complete, usable tenant."""

    def test_full_registration(
        self, db_session, ctx, platform, company_seller, registration_input, recording_router
    ):
        result = RegistrationService().provision_customer(ctx, registration_input)

        assert isinstance(result, ProvisionResult)
        tenant = db_session.get(Tenant, result.tenant_id)
        assert tenant.code == "acme"
        assert tenant.default_currency_code == "USD"
        assert tenant.status == "UNAPPROVED"
        assert tenant.seller_id == company_seller.id
        assert [store.id for store in tenant.stock_locations] == [result.store_id]
        assert tenant.stock_locations[0].name == "Main Store"
        assert sorted(pm.code for pm in tenant.payment_methods) == [
            f"cash-{tenant.id}",
            f"mpesa-{tenant.id}",
        ]

        role = db_session.get(Role, result.role_id)
        assert role.code == "acme-admin"
        assert len(role.permissions) == 25
        assert role.tenants == [tenant]
        assert tenant in platform.super_admin_role.tenants

        user = db_session.get(User, result.user_id)
        assert user.identifier == "+254712345678"
        assert user.verified is True
        assert user.roles == [role]

        administrator = db_session.get(Administrator, result.admin_id)
        assert administrator.user_id == user.id
        assert administrator.email_address == "+254712345678"

        assert recording_router.event_types == ["admin_created", "user_created"]
        assert _audit_event_types(db_session, tenant.id) == [
            "administrator.created",
            "paymentmethod.created",
            "paymentmethod.created",
            "role.created",
            "stocklocation.created",
            "tenant.created",
            "user.created",
        ]

    def test_role_uses_service_when_permissions_are_fresh(
        self, db_session, ctx, registration_input
    ):
        result = RegistrationService().provision_customer(ctx, registration_input)

        entry = db_session.execute(
            select(AuditLog).where(
                AuditLog.event_type == "role.created", AuditLog.entity_id == result.role_id
            )
        ).scalar_one()
        assert entry.data["strategy"] == "service"

    def test_role_falls_back_when_permissions_are_cached(
        self, db_session, ctx, registration_input
    ):
        """Permissions loaded before the tenant exists do not cover it."""
        PermissionService().permitted_tenant_ids(ctx)

        result = RegistrationService().provision_customer(ctx, registration_input)

        role = db_session.get(Role, result.role_id)
        assert [tenant.id for tenant in role.tenants] == [result.tenant_id]
        entry = db_session.execute(
            select(AuditLog).where(AuditLog.event_type == "role.created")
        ).scalar_one()
        assert entry.data["strategy"] == "repository"

    def test_phone_is_normalized_once(self, db_session, ctx, registration_input):
        data = registration_input.model_copy(update={"admin_phone_number": "+254 712 345 678"})

        result = RegistrationService().provision_customer(ctx, data)

        assert db_session.get(User, result.user_id).identifier == "+254712345678"

    def test_each_tenant_has_its_own_owner(
        self, db_session, ctx, default_tenant, registration_input
    ):
        beta_input = RegistrationInputFactory(
            company_name="Beta Ltd",
            company_code="beta",
            admin_phone_number="0722000111",
            store_name="Beta Store",
            seller_id=SellerFactory(name="Beta Ltd Seller").id,
        )

        acme = RegistrationService().provision_customer(ctx, registration_input)
        beta = RegistrationService().provision_customer(ctx, beta_input)

        owners = {
            default_tenant.seller_id,
            db_session.get(Tenant, acme.tenant_id).seller_id,
            db_session.get(Tenant, beta.tenant_id).seller_id,
        }
        assert len(owners) == 3


class TestProvisionCustomerFailures:
    """The first failing step stops the run with its own code."""

    def test_replay_reports_code_exists(self, ctx, registration_input):
        RegistrationService().provision_customer(ctx, registration_input)
        steps = _mocked_steps()

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService(**steps).provision_customer(ctx, registration_input)

        assert exc_info.value.code == RegistrationErrorCode.CODE_EXISTS
        for step in steps.values():
            assert not step.method_calls

    def test_blank_store_name_stops_before_payments(self, ctx, registration_input):
        steps = _mocked_steps()
        del steps["tenant_provisioner"]
        del steps["store_provisioner"]
        data = registration_input.model_copy(update={"store_name": "   "})

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService(**steps).provision_customer(ctx, data)

        assert exc_info.value.code == RegistrationErrorCode.STORE_NAME_REQUIRED
        assert str(exc_info.value).count("REGISTRATION_") == 1
        for step in steps.values():
            assert not step.method_calls

    def test_store_not_visible_after_assignment(self, ctx, registration_input):
        with patch(
            "tenant_provisioning.provisioning.tenant_assignment.verify_related",
            return_value=False,
        ):
            with pytest.raises(RegistrationError) as exc_info:
                RegistrationService().provision_customer(ctx, registration_input)

        assert exc_info.value.code == RegistrationErrorCode.STOCK_LOCATION_ASSIGN_FAILED
        assert str(exc_info.value).startswith("REGISTRATION_STOCK_LOCATION_ASSIGN_FAILED:")

    def test_missing_owner_creates_nothing(self, db_session, ctx, registration_input):
        data = registration_input.model_copy(update={"seller_id": None})

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService().provision_customer(ctx, data)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED
        assert db_session.execute(select(Tenant).where(Tenant.code == "acme")).first() is None

    def test_invalid_currency(self, ctx, registration_input):
        data = registration_input.model_copy(update={"currency": "ABC"})

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService().provision_customer(ctx, data)

        assert exc_info.value.code == RegistrationErrorCode.CURRENCY_INVALID

    def test_invalid_phone_is_provisioning_failure(self, ctx, registration_input):
        data = registration_input.model_copy(update={"admin_phone_number": "12345"})
        steps = _mocked_steps()

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService(**steps).provision_customer(ctx, data)

        assert exc_info.value.code == RegistrationErrorCode.PROVISIONING_FAILED
        assert "Invalid phone number format" in str(exc_info.value)

    def test_unexpected_error_is_provisioning_failure(self, ctx, registration_input):
        steps = _mocked_steps()
        steps["tenant_provisioner"].create_tenant.side_effect = RuntimeError("disk full")

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService(**steps).provision_customer(ctx, registration_input)

        assert exc_info.value.code == RegistrationErrorCode.PROVISIONING_FAILED
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert not steps["store_provisioner"].method_calls

    def test_administrator_without_user(self, ctx, registration_input):
        steps = _mocked_steps()
        steps["access_provisioner"].create_administrator.return_value = MagicMock(
            id="a-1", user_id=None
        )

        with pytest.raises(RegistrationError) as exc_info:
            RegistrationService(**steps).provision_customer(ctx, registration_input)

        assert exc_info.value.code == RegistrationErrorCode.PROVISIONING_FAILED


class TestRegistrationTransaction:
    """The caller's transaction is the only cleanup mechanism."""

    @pytest.fixture
    def seeded(self, db_manager):
        with db_manager.transaction() as session:
            platform = seed_platform(session)
            seller = SellerFactory(name="Acme Ltd Seller")
            return SimpleNamespace(
                context={
                    "tenant_id": platform.default_tenant.id,
                    "active_user_id": platform.super_admin.id,
                },
                seller_id=seller.id,
            )

    @pytest.fixture
    def registration_input(self, seeded):
        return RegistrationInputFactory(seller_id=seeded.seller_id)

    def test_commit_persists_everything(self, db_manager, seeded, registration_input):
        with db_manager.transaction() as session:
            ctx = RequestContext(session=session, **seeded.context)
            result = RegistrationService().provision_customer(ctx, registration_input)

        with db_manager.transaction() as session:
            tenant = session.get(Tenant, result.tenant_id)
            assert tenant.code == "acme"
            assert len(tenant.payment_methods) == 2

    def test_failure_leaves_no_partial_tenant(self, db_manager, seeded, registration_input):
        before = _row_counts(db_manager)

        with patch(
            "tenant_provisioning.provisioning.access_provisioner.verify_related",
            return_value=False,
        ):
            with pytest.raises(RegistrationError) as exc_info:
                with db_manager.transaction() as session:
                    ctx = RequestContext(session=session, **seeded.context)
                    RegistrationService().provision_customer(ctx, registration_input)

        assert exc_info.value.code == RegistrationErrorCode.USER_ASSIGN_FAILED
        assert _row_counts(db_manager) == before

    def test_code_can_be_reused_after_rollback(self, db_manager, seeded, registration_input):
        with pytest.raises(RegistrationError):
            with db_manager.transaction() as session:
                ctx = RequestContext(session=session, **seeded.context)
                RegistrationService().provision_customer(
                    ctx, registration_input.model_copy(update={"store_name": ""})
                )

        with db_manager.transaction() as session:
            ctx = RequestContext(session=session, **seeded.context)
            result = RegistrationService().provision_customer(ctx, registration_input)

        assert result.tenant_id
