from typing import Iterable, Optional

from sqlalchemy import select

from ..config import get_config
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_payment_models import PaymentMethod
from ..exceptions import ErrorCode, ServiceError, duplicate
from ..schemas.entity_schemas import PaymentMethodCreate
from .base_service import BaseService


class PaymentMethodService(BaseService):
    """
    Creates payment methods for the owner of the active tenant.

    Only handlers present in the registry can back a payment method.
    """

    def __init__(self, handlers: Optional[Iterable[str]] = None, logger=None):
        super().__init__(logger)
        if handlers is None:
            handlers = get_config().provisioning.payment_handlers
        self.handlers = frozenset(handlers)

    @operation()
    def create(self, ctx: RequestContext, data: PaymentMethodCreate) -> PaymentMethod:
        try:
            self._require_owning_party_scope(ctx, "create_payment_method")

            if data.handler_code not in self.handlers:
                raise ServiceError(
                    f"No PaymentMethodHandler with code '{data.handler_code}'",
                    error_code=ErrorCode.NOT_FOUND,
                    operation="create_payment_method",
                    handler_code=data.handler_code,
                    registered_handlers=sorted(self.handlers),
                )

            existing = ctx.session.execute(
                select(PaymentMethod.id).where(PaymentMethod.code == data.code)
            ).first()
            if existing is not None:
                raise duplicate("PaymentMethod", code=data.code)

            payment_method = PaymentMethod(**data.model_dump())
            ctx.session.add(payment_method)
            ctx.session.flush()

            self.logger.info(
                f"Created payment method: {payment_method.code}",
                extra={"payment_method_id": payment_method.id, "tenant_id": ctx.tenant_id},
            )
            return payment_method
        except Exception as e:
            self._handle_service_exception("create_payment_method", e)
