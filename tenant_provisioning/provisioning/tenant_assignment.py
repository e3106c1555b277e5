"""
Assign-then-verify helpers for the relations registration creates.

Each assignment is re-read inside the same transaction before the pipeline
moves on. A relation that cannot be read back fails with the step's
``*_ASSIGN_FAILED`` code.
"""

from sqlalchemy import func, select

from ..context.request_context import RequestContext
from ..db.db_access_models import Role
from ..db.db_tenant_models import tenant_payment_methods
from ..utils.logger import get_logger
from ..utils.relation_utils import assign_related, verify_related
from .registration_errors import RegistrationErrorCode, create_error, wrap_error


class TenantAssignmentService:
    def __init__(self):
        self.logger = get_logger()

    def _assign_and_verify(
        self,
        ctx: RequestContext,
        tenant_id: str,
        relation_name: str,
        child_id: str,
        label: str,
        code: RegistrationErrorCode,
    ) -> None:
        try:
            assign_related(ctx.session, ctx, tenant_id, relation_name, child_id)
        except Exception as e:
            raise wrap_error(e, code, f"Failed to assign {label} {child_id} to tenant {tenant_id}")

        if not verify_related(ctx.session, ctx, tenant_id, relation_name, child_id):
            raise create_error(
                code,
                f"{label} {child_id} is not assigned to tenant {tenant_id} after assignment",
                tenant_id=tenant_id,
                child_id=child_id,
            )

        self.logger.info(
            f"{label} assigned to tenant",
            extra={"tenant_id": tenant_id, "child_id": child_id, "relation_name": relation_name},
        )

    def assign_stock_location_to_tenant(
        self, ctx: RequestContext, stock_location_id: str, tenant_id: str
    ) -> None:
        self._assign_and_verify(
            ctx,
            tenant_id,
            "stock_locations",
            stock_location_id,
            "Stock location",
            RegistrationErrorCode.STOCK_LOCATION_ASSIGN_FAILED,
        )

    def assign_payment_method_to_tenant(
        self, ctx: RequestContext, payment_method_id: str, tenant_id: str
    ) -> None:
        self._assign_and_verify(
            ctx,
            tenant_id,
            "payment_methods",
            payment_method_id,
            "Payment method",
            RegistrationErrorCode.PAYMENT_METHOD_ASSIGN_FAILED,
        )

    def assign_role_to_tenant(self, ctx: RequestContext, role_id: str, tenant_id: str) -> None:
        """Link from the role side. Verification is left to ``verify_role_tenant``."""
        assign_related(ctx.session, ctx, role_id, "tenants", tenant_id, parent_model=Role)

    def verify_role_tenant(self, ctx: RequestContext, role_id: str, tenant_id: str) -> None:
        if not verify_related(ctx.session, ctx, role_id, "tenants", tenant_id, parent_model=Role):
            raise create_error(
                RegistrationErrorCode.ROLE_ASSIGN_FAILED,
                f"Role {role_id} is not properly linked to tenant {tenant_id}",
                role_id=role_id,
                tenant_id=tenant_id,
            )

    def verify_payment_method_count(
        self, ctx: RequestContext, tenant_id: str, minimum_count: int = 2
    ) -> None:
        count = ctx.session.execute(
            select(func.count())
            .select_from(tenant_payment_methods)
            .where(tenant_payment_methods.c.tenant_id == tenant_id)
        ).scalar_one()
        if count < minimum_count:
            raise create_error(
                RegistrationErrorCode.PAYMENT_METHOD_ASSIGN_FAILED,
                f"Tenant should have at least {minimum_count} payment methods assigned, "
                f"but found {count}",
                tenant_id=tenant_id,
            )
