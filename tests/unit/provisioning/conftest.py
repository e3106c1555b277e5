import pytest

from tests.fixtures.factories import TenantFactory


@pytest.fixture
def new_tenant(db_session, platform):
    """A freshly created tenant with its own seller, visible to the super admin."""
    default_tenant = platform.default_tenant
    tenant = TenantFactory(
        code="acme",
        default_currency_code="USD",
        status="UNAPPROVED",
        default_shipping_zone=default_tenant.default_shipping_zone,
        default_tax_zone=default_tenant.default_tax_zone,
    )
    platform.super_admin_role.tenants.append(tenant)
    db_session.flush()
    return tenant
