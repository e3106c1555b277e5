"""
Tests for assign-then-verify tenant relations.
"""

from unittest.mock import patch

import pytest

from tenant_provisioning.provisioning import (
    RegistrationError,
    RegistrationErrorCode,
    TenantAssignmentService,
)
from tests.fixtures.factories import PaymentMethodFactory, RoleFactory, StockLocationFactory

VERIFY = "tenant_provisioning.provisioning.tenant_assignment.verify_related"


@pytest.fixture
def assignment():
    return TenantAssignmentService()


class TestTenantAssignmentService:
    def test_assign_stock_location(self, assignment, ctx, new_tenant):
        store = StockLocationFactory()

        assignment.assign_stock_location_to_tenant(ctx, store.id, new_tenant.id)

        assert new_tenant.stock_locations == [store]

    def test_stock_location_not_visible(self, assignment, ctx, new_tenant):
        store = StockLocationFactory()

        with patch(VERIFY, return_value=False):
            with pytest.raises(RegistrationError) as exc_info:
                assignment.assign_stock_location_to_tenant(ctx, store.id, new_tenant.id)

        assert exc_info.value.code == RegistrationErrorCode.STOCK_LOCATION_ASSIGN_FAILED

    def test_assign_failure_is_coded(self, assignment, ctx, new_tenant):
        with patch(
            "tenant_provisioning.provisioning.tenant_assignment.assign_related",
            side_effect=RuntimeError("locked"),
        ):
            with pytest.raises(RegistrationError) as exc_info:
                assignment.assign_payment_method_to_tenant(ctx, "pm-1", new_tenant.id)

        assert exc_info.value.code == RegistrationErrorCode.PAYMENT_METHOD_ASSIGN_FAILED
        assert "locked" in str(exc_info.value)

    def test_payment_method_count(self, assignment, ctx, new_tenant):
        for code in ("cash-x", "mpesa-x"):
            payment_method = PaymentMethodFactory(code=code)
            assignment.assign_payment_method_to_tenant(ctx, payment_method.id, new_tenant.id)

        assignment.verify_payment_method_count(ctx, new_tenant.id)

    def test_payment_method_count_too_low(self, assignment, ctx, new_tenant):
        payment_method = PaymentMethodFactory()
        assignment.assign_payment_method_to_tenant(ctx, payment_method.id, new_tenant.id)

        with pytest.raises(RegistrationError) as exc_info:
            assignment.verify_payment_method_count(ctx, new_tenant.id, minimum_count=2)

        assert exc_info.value.code == RegistrationErrorCode.PAYMENT_METHOD_ASSIGN_FAILED
        assert "found 1" in str(exc_info.value)

    def test_role_assignment_and_verification(self, assignment, ctx, new_tenant):
        role = RoleFactory()

        assignment.assign_role_to_tenant(ctx, role.id, new_tenant.id)
        assignment.verify_role_tenant(ctx, role.id, new_tenant.id)

        assert new_tenant in role.tenants

    def test_role_not_linked(self, assignment, ctx, new_tenant):
        role = RoleFactory()

        with pytest.raises(RegistrationError) as exc_info:
            assignment.verify_role_tenant(ctx, role.id, new_tenant.id)

        assert exc_info.value.code == RegistrationErrorCode.ROLE_ASSIGN_FAILED
