"""
Tests for TenantProvisioner.
"""

import pytest
from sqlalchemy import select

from tenant_provisioning.config import AppConfig, ProvisioningConfig, QueueConfig, set_config
from tenant_provisioning.db import AuditLog
from tenant_provisioning.provisioning import (
    RegistrationError,
    RegistrationErrorCode,
    TenantProvisioner,
)
from tests.fixtures.factories import SellerFactory, TenantFactory

PHONE = "+254712345678"


@pytest.fixture
def provisioner():
    return TenantProvisioner()


class TestCreateTenant:
    def test_creates_unapproved_tenant(
        self, provisioner, ctx, default_tenant, company_seller, registration_input
    ):
        tenant = provisioner.create_tenant(ctx, registration_input, default_tenant, PHONE)

        assert tenant.code == "acme"
        assert tenant.token == "acme"
        assert tenant.status == "UNAPPROVED"
        assert tenant.default_currency_code == "USD"
        assert tenant.default_language_code == "en"
        assert tenant.prices_include_tax is True
        assert tenant.default_shipping_zone_id == default_tenant.default_shipping_zone_id
        assert tenant.default_tax_zone_id == default_tenant.default_tax_zone_id
        assert tenant.seller_id == company_seller.id

    def test_super_admin_role_gets_the_tenant(
        self, provisioner, ctx, platform, registration_input
    ):
        tenant = provisioner.create_tenant(
            ctx, registration_input, platform.default_tenant, PHONE
        )

        assert tenant in platform.super_admin_role.tenants

    def test_audited_under_the_new_tenant(
        self, provisioner, db_session, ctx, default_tenant, registration_input
    ):
        tenant = provisioner.create_tenant(ctx, registration_input, default_tenant, PHONE)

        entry = db_session.execute(
            select(AuditLog).where(AuditLog.event_type == "tenant.created")
        ).scalar_one()
        assert entry.tenant_id == tenant.id
        assert entry.data["admin_phone_number"] == PHONE
        assert entry.data["company_name"] == "Acme Ltd"

    def test_seller_is_required(self, provisioner, ctx, default_tenant, registration_input):
        data = registration_input.model_copy(update={"seller_id": None})

        with pytest.raises(RegistrationError) as exc_info:
            provisioner.create_tenant(ctx, data, default_tenant, PHONE)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED
        assert "No owning party" in str(exc_info.value)

    def test_default_tenant_seller_is_rejected(
        self, provisioner, ctx, default_tenant, registration_input
    ):
        data = registration_input.model_copy(update={"seller_id": default_tenant.seller_id})

        with pytest.raises(RegistrationError) as exc_info:
            provisioner.create_tenant(ctx, data, default_tenant, PHONE)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED
        assert default_tenant.id in str(exc_info.value)

    def test_seller_owning_another_tenant_is_rejected(
        self, provisioner, ctx, default_tenant, registration_input
    ):
        seller = SellerFactory()
        TenantFactory(seller=seller)
        data = registration_input.model_copy(update={"seller_id": seller.id})

        with pytest.raises(RegistrationError) as exc_info:
            provisioner.create_tenant(ctx, data, default_tenant, PHONE)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED

    def test_unknown_upstream_seller(self, provisioner, ctx, default_tenant, registration_input):
        data = registration_input.model_copy(update={"seller_id": "missing"})

        with pytest.raises(RegistrationError) as exc_info:
            provisioner.create_tenant(ctx, data, default_tenant, PHONE)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED

    def test_duplicate_code(self, provisioner, ctx, default_tenant, registration_input):
        TenantFactory(code="acme")

        with pytest.raises(RegistrationError) as exc_info:
            provisioner.create_tenant(ctx, registration_input, default_tenant, PHONE)

        assert exc_info.value.code == RegistrationErrorCode.TENANT_CREATE_FAILED
        assert "acme" in str(exc_info.value)

    def test_missing_super_admin_role_is_not_fatal(
        self, provisioner, ctx, platform, registration_input, caplog
    ):
        set_config(
            AppConfig(
                queue=QueueConfig(connection_string=""),
                provisioning=ProvisioningConfig(super_admin_role_code="__no_such_role__"),
            )
        )

        tenant = provisioner.create_tenant(
            ctx, registration_input, platform.default_tenant, PHONE
        )

        assert tenant.id
        assert tenant not in platform.super_admin_role.tenants
        assert any("Super admin role not found" in r.getMessage() for r in caplog.records)
