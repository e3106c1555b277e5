"""
Tests for the registration pre-flight checks.
"""

import pytest

from tenant_provisioning.context import RequestContext
from tenant_provisioning.provisioning import (
    RegistrationError,
    RegistrationErrorCode,
    RegistrationValidator,
)
from tests.fixtures.factories import AdministratorFactory, TenantFactory, UserFactory


@pytest.fixture
def validator():
    return RegistrationValidator()


def _code(exc_info):
    return exc_info.value.code


class TestValidateInput:
    def test_valid_input(self, validator, db_session, ctx, registration_input):
        validator.validate_input(ctx, registration_input, phone="+254712345678")

        assert not db_session.new
        assert not db_session.dirty

    def test_invalid_currency(self, validator, ctx, registration_input):
        data = registration_input.model_copy(update={"currency": "XYZ"})

        with pytest.raises(RegistrationError) as exc_info:
            validator.validate_input(ctx, data)

        assert _code(exc_info) == RegistrationErrorCode.CURRENCY_INVALID

    def test_currency_checked_before_code(self, validator, ctx, registration_input):
        TenantFactory(code="acme")
        data = registration_input.model_copy(update={"currency": "XYZ"})

        with pytest.raises(RegistrationError) as exc_info:
            validator.validate_input(ctx, data)

        assert _code(exc_info) == RegistrationErrorCode.CURRENCY_INVALID

    def test_code_exists(self, validator, ctx, registration_input):
        TenantFactory(code="acme")

        with pytest.raises(RegistrationError) as exc_info:
            validator.validate_input(ctx, registration_input)

        assert _code(exc_info) == RegistrationErrorCode.CODE_EXISTS
        assert str(exc_info.value).startswith("REGISTRATION_CODE_EXISTS:")

    def test_email_used_by_another_phone(self, validator, ctx, registration_input):
        AdministratorFactory(
            email_address="jane@acme.test", user=UserFactory(identifier="+254799999999")
        )
        data = registration_input.model_copy(update={"admin_email": "jane@acme.test"})

        with pytest.raises(RegistrationError) as exc_info:
            validator.validate_input(ctx, data, phone="+254712345678")

        assert _code(exc_info) == RegistrationErrorCode.EMAIL_EXISTS

    def test_email_reused_by_same_phone(self, validator, ctx, registration_input):
        AdministratorFactory(
            email_address="jane@acme.test", user=UserFactory(identifier="+254712345678")
        )
        data = registration_input.model_copy(update={"admin_email": "jane@acme.test"})

        validator.validate_input(ctx, data, phone="0712345678")


class TestGetDefaultTenant:
    def test_context_tenant_with_zones(self, validator, ctx, default_tenant):
        assert validator.get_default_tenant(ctx) is default_tenant

    def test_falls_back_to_first_tenant(self, validator, ctx, default_tenant):
        zoneless = TenantFactory(default_shipping_zone=None, default_tax_zone=None)

        assert validator.get_default_tenant(ctx.for_tenant(zoneless.id)) is default_tenant

    def test_zones_missing(self, validator, db_session):
        TenantFactory(default_shipping_zone=None, default_tax_zone=None)
        ctx = RequestContext(session=db_session)

        with pytest.raises(RegistrationError) as exc_info:
            validator.get_default_tenant(ctx)

        assert _code(exc_info) == RegistrationErrorCode.ZONES_MISSING

    def test_zones_missing_fails_validation(self, validator, db_session, registration_input):
        ctx = RequestContext(session=db_session)

        with pytest.raises(RegistrationError) as exc_info:
            validator.validate_input(ctx, registration_input)

        assert _code(exc_info) == RegistrationErrorCode.ZONES_MISSING
