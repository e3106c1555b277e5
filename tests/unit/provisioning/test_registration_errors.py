"""
Tests for the registration error taxonomy.
"""

import logging
from unittest.mock import MagicMock

import pytest

from tenant_provisioning.exceptions import ErrorCode, ServiceError
from tenant_provisioning.provisioning import (
    RegistrationError,
    RegistrationErrorCode,
    create_error,
    is_registration_error,
    log_error,
    wrap_error,
)
from tenant_provisioning.utils.logger import get_logger


class TestRegistrationError:
    def test_string_form_carries_code(self):
        error = create_error(RegistrationErrorCode.CODE_EXISTS, "Company code 'acme' is taken")

        assert str(error) == "REGISTRATION_CODE_EXISTS: Company code 'acme' is taken"
        assert error.code == RegistrationErrorCode.CODE_EXISTS
        assert error.message == "Company code 'acme' is taken"

    @pytest.mark.parametrize(
        "code,error_code,status_code",
        [
            (RegistrationErrorCode.CURRENCY_INVALID, ErrorCode.VALIDATION_FAILED, 400),
            (RegistrationErrorCode.CODE_EXISTS, ErrorCode.DUPLICATE, 409),
            (RegistrationErrorCode.ZONES_MISSING, ErrorCode.PRECONDITION_FAILED, 412),
            (RegistrationErrorCode.STORE_NAME_REQUIRED, ErrorCode.MISSING_REQUIRED, 400),
            (RegistrationErrorCode.ROLE_ASSIGN_FAILED, ErrorCode.CONFLICT, 500),
            (RegistrationErrorCode.TENANT_CREATE_FAILED, ErrorCode.INTERNAL_ERROR, 500),
            (RegistrationErrorCode.PROVISIONING_FAILED, ErrorCode.INTERNAL_ERROR, 500),
        ],
    )
    def test_classification(self, code, error_code, status_code):
        error = RegistrationError(code, "x")

        assert error.error_code == error_code
        assert error.status_code == status_code
        assert error.context["registration_code"] == code.value

    def test_accepts_code_value(self):
        assert RegistrationError("EMAIL_EXISTS", "x").code == RegistrationErrorCode.EMAIL_EXISTS

    def test_context_and_cause(self):
        cause = ValueError("db down")
        error = create_error(
            RegistrationErrorCode.TENANT_CREATE_FAILED, "failed", cause=cause, tenant_code="acme"
        )

        assert error.cause is cause
        assert error.context["tenant_code"] == "acme"
        assert error.to_dict()["error"]["message"].startswith("REGISTRATION_TENANT_CREATE_FAILED")


class TestWrapError:
    """Test that coded errors are never wrapped twice."""

    def test_plain_error_is_wrapped(self):
        cause = ServiceError("insert failed")

        wrapped = wrap_error(cause, RegistrationErrorCode.TENANT_CREATE_FAILED, "Creating tenant")

        assert isinstance(wrapped, RegistrationError)
        assert str(wrapped) == "REGISTRATION_TENANT_CREATE_FAILED: Creating tenant: insert failed"
        assert wrapped.cause is cause

    def test_coded_error_passes_through(self):
        original = create_error(RegistrationErrorCode.STORE_NAME_REQUIRED, "Store name is required")

        wrapped = wrap_error(original, RegistrationErrorCode.PROVISIONING_FAILED, "Provisioning")

        assert wrapped is original
        assert str(wrapped).count("REGISTRATION_") == 1

    def test_coded_message_passes_through(self):
        original = RuntimeError("REGISTRATION_ROLE_ASSIGN_FAILED: not linked")

        assert wrap_error(original, RegistrationErrorCode.PROVISIONING_FAILED) is original

    def test_empty_message_uses_type(self):
        wrapped = wrap_error(KeyError(), RegistrationErrorCode.PROVISIONING_FAILED)

        assert str(wrapped) == "REGISTRATION_PROVISIONING_FAILED: KeyError"

    def test_is_registration_error(self):
        assert is_registration_error(create_error(RegistrationErrorCode.CODE_EXISTS, "x"))
        assert is_registration_error(Exception("REGISTRATION_CODE_EXISTS: x"))
        assert not is_registration_error(Exception("plain"))


class TestLogError:
    def test_logs_source_and_code(self):
        logger = MagicMock()
        error = create_error(RegistrationErrorCode.CODE_EXISTS, "taken")

        log_error(logger, "RegistrationValidator", error, "Validation", company_code="acme")

        message = logger.error.call_args[0][0]
        extra = logger.error.call_args[1]["extra"]
        assert message.startswith("[RegistrationValidator] Validation failed:")
        assert extra["registration_code"] == "CODE_EXISTS"
        assert extra["company_code"] == "acme"

    def test_uncoded_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="tenant_provisioning"):
            log_error(get_logger(), "StoreProvisioner", RuntimeError("x"), "Store creation")

        assert caplog.records[-1].registration_code is None
