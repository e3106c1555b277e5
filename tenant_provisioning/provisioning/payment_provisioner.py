"""
Creates the payment methods every new tenant starts with.
"""

from typing import List, Optional

from ..constants import PaymentHandlerCode
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_payment_models import PaymentMethod
from ..exceptions import ErrorCode, ServiceError
from ..schemas.entity_schemas import PaymentMethodCreate
from ..services.payment_method_service import PaymentMethodService
from ..utils.logger import get_logger
from .context_adapter import ProvisioningContextAdapter
from .registration_auditor import RegistrationAuditor
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error
from .tenant_assignment import TenantAssignmentService

# (handler, display name, description), in creation order
DEFAULT_PAYMENT_METHODS = (
    (PaymentHandlerCode.CASH, "Cash Payment", "Cash Payment - Immediate settlement"),
    (PaymentHandlerCode.MPESA, "M-Pesa Payment", "M-Pesa Payment - Mobile money"),
)


def payment_method_code(handler_code: str, tenant_id: str) -> str:
    return f"{handler_code}-{tenant_id}"


class PaymentProvisioner:
    def __init__(
        self,
        payment_method_service: Optional[PaymentMethodService] = None,
        context_adapter: Optional[ProvisioningContextAdapter] = None,
        assignment: Optional[TenantAssignmentService] = None,
        auditor: Optional[RegistrationAuditor] = None,
    ):
        self.payment_method_service = payment_method_service or PaymentMethodService()
        self.context_adapter = context_adapter or ProvisioningContextAdapter()
        self.assignment = assignment or TenantAssignmentService()
        self.auditor = auditor or RegistrationAuditor()
        self.logger = get_logger()

    @operation()
    def create_and_assign_payment_methods(
        self, ctx: RequestContext, tenant_id: str, company_code: str
    ) -> List[PaymentMethod]:
        """
        Create, assign and audit cash then M-Pesa.

        Raises:
            RegistrationError: PAYMENT_HANDLER_MISSING, PAYMENT_METHOD_CREATE_FAILED
                or PAYMENT_METHOD_ASSIGN_FAILED
        """
        try:
            payment_methods = []
            for handler_code, name, description in DEFAULT_PAYMENT_METHODS:
                payment_method = self._create_payment_method(
                    ctx, tenant_id, handler_code.value, name, description
                )
                self.assignment.assign_payment_method_to_tenant(ctx, payment_method.id, tenant_id)
                self.auditor.log_entity_created(
                    ctx,
                    "PaymentMethod",
                    payment_method.id,
                    payment_method,
                    extra={"handler": handler_code.value, "company_code": company_code},
                    tenant_id=tenant_id,
                )
                payment_methods.append(payment_method)

            self.assignment.verify_payment_method_count(
                ctx, tenant_id, len(DEFAULT_PAYMENT_METHODS)
            )
            return payment_methods
        except Exception as e:
            log_error(self.logger, "PaymentProvisioner", e, "Payment method creation")
            raise wrap_error(e, RegistrationErrorCode.PAYMENT_METHOD_CREATE_FAILED)

    def _create_payment_method(
        self,
        ctx: RequestContext,
        tenant_id: str,
        handler_code: str,
        name: str,
        description: str,
    ) -> PaymentMethod:
        payment_data = PaymentMethodCreate(
            code=payment_method_code(handler_code, tenant_id),
            name=name,
            description=description,
            enabled=True,
            handler_code=handler_code,
            handler_args=[],
        )
        try:
            return self.context_adapter.with_owning_party_scope(
                ctx,
                tenant_id,
                lambda scoped: self.payment_method_service.create(scoped, payment_data),
                operation_name=f"create_payment_method:{handler_code}",
            )
        except ServiceError as e:
            if e.error_code == ErrorCode.NOT_FOUND and "handler_code" in e.context:
                raise create_error(
                    RegistrationErrorCode.PAYMENT_HANDLER_MISSING,
                    f"Payment handler '{handler_code}' is not configured. "
                    f"Add it to provisioning.payment_handlers.",
                    cause=e,
                    handler_code=handler_code,
                )
            raise create_error(
                RegistrationErrorCode.PAYMENT_METHOD_CREATE_FAILED,
                f"Failed to create {name} payment method: {e.message}",
                cause=e,
                handler_code=handler_code,
            )
