"""
Registration orchestrator.

Runs the provisioning steps in order on the caller's session:

    validated -> tenant -> store -> payment methods -> role -> administrator -> done

The first failure stops the run. Nothing is cleaned up here; the caller
rolls back its transaction.
"""

from enum import Enum
from typing import Optional

from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..events.event_router import EventRouter
from ..schemas.registration_schema import ProvisionResult, RegistrationInput
from ..utils.logger import get_logger
from ..utils.phone_utils import normalize_phone_number
from .access_provisioner import AccessProvisioner
from .payment_provisioner import PaymentProvisioner
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error
from .registration_validator import RegistrationValidator
from .role_provisioner import RoleProvisioner
from .store_provisioner import StoreProvisioner
from .tenant_provisioner import TenantProvisioner


class RegistrationStep(str, Enum):
    VALIDATED = "validated"
    TENANT_CREATED = "tenant_created"
    STORE_CREATED = "store_created"
    PAYMENT_METHODS_CREATED = "payment_methods_created"
    ROLE_CREATED = "role_created"
    ADMINISTRATOR_CREATED = "administrator_created"
    DONE = "done"


class RegistrationService:
    def __init__(
        self,
        validator: Optional[RegistrationValidator] = None,
        tenant_provisioner: Optional[TenantProvisioner] = None,
        store_provisioner: Optional[StoreProvisioner] = None,
        payment_provisioner: Optional[PaymentProvisioner] = None,
        role_provisioner: Optional[RoleProvisioner] = None,
        access_provisioner: Optional[AccessProvisioner] = None,
        event_router: Optional[EventRouter] = None,
    ):
        self.validator = validator or RegistrationValidator()
        self.tenant_provisioner = tenant_provisioner or TenantProvisioner()
        self.store_provisioner = store_provisioner or StoreProvisioner()
        self.payment_provisioner = payment_provisioner or PaymentProvisioner()
        self.role_provisioner = role_provisioner or RoleProvisioner()
        self.access_provisioner = access_provisioner or AccessProvisioner(event_router=event_router)
        self.logger = get_logger()

    def _step(self, step: RegistrationStep, data: RegistrationInput, **context) -> None:
        self.logger.info(
            f"Registration step: {step.value}",
            extra={"company_code": data.company_code, "step": step.value, **context},
        )

    @operation()
    def provision_customer(self, ctx: RequestContext, data: RegistrationInput) -> ProvisionResult:
        """
        Provision a complete tenant for ``data`` inside the caller's transaction.

        Raises:
            RegistrationError: the failing step's code, or PROVISIONING_FAILED
        """
        try:
            phone = normalize_phone_number(data.admin_phone_number)

            self.validator.validate_input(ctx, data, phone=phone)
            default_tenant = self.validator.get_default_tenant(ctx)
            self._step(RegistrationStep.VALIDATED, data, default_tenant_id=default_tenant.id)

            tenant = self.tenant_provisioner.create_tenant(ctx, data, default_tenant, phone)
            self._step(RegistrationStep.TENANT_CREATED, data, tenant_id=tenant.id)

            store = self.store_provisioner.create_and_assign_store(ctx, data, tenant.id)
            self._step(RegistrationStep.STORE_CREATED, data, store_id=store.id)

            self.payment_provisioner.create_and_assign_payment_methods(
                ctx, tenant.id, data.company_code
            )
            self._step(RegistrationStep.PAYMENT_METHODS_CREATED, data, tenant_id=tenant.id)

            role = self.role_provisioner.create_admin_role(ctx, data, tenant.id)
            self._step(RegistrationStep.ROLE_CREATED, data, role_id=role.id)

            administrator = self.access_provisioner.create_administrator(
                ctx, data, role, phone, tenant_id=tenant.id
            )
            self._step(
                RegistrationStep.ADMINISTRATOR_CREATED, data, administrator_id=administrator.id
            )

            if not administrator.user_id:
                raise create_error(
                    RegistrationErrorCode.PROVISIONING_FAILED,
                    f"Administrator {administrator.id} has no linked user",
                )

            result = ProvisionResult(
                tenant_id=tenant.id,
                store_id=store.id,
                role_id=role.id,
                admin_id=administrator.id,
                user_id=administrator.user_id,
            )
            self._step(RegistrationStep.DONE, data, **result.model_dump())
            return result
        except Exception as e:
            log_error(
                self.logger,
                "RegistrationService",
                e,
                "Customer provisioning",
                company_code=data.company_code,
            )
            raise wrap_error(
                e, RegistrationErrorCode.PROVISIONING_FAILED, "Customer provisioning failed"
            )
