"""
Read-only pre-flight checks for a registration.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ..constants import is_valid_currency
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_access_models import Administrator
from ..db.db_tenant_models import Tenant
from ..schemas.registration_schema import RegistrationInput
from ..services.tenant_service import TenantService
from ..utils.logger import get_logger
from ..utils.phone_utils import normalize_phone_number
from .registration_errors import RegistrationErrorCode, create_error

_ZONE_RELATIONS = ("default_shipping_zone", "default_tax_zone")


class RegistrationValidator:
    def __init__(self, tenant_service: Optional[TenantService] = None):
        self.tenant_service = tenant_service or TenantService()
        self.logger = get_logger()

    @operation()
    def validate_input(
        self, ctx: RequestContext, data: RegistrationInput, phone: Optional[str] = None
    ) -> None:
        """
        Check a registration can proceed. Writes nothing.

        Raises:
            RegistrationError: CURRENCY_INVALID, CODE_EXISTS, ZONES_MISSING or EMAIL_EXISTS
        """
        if not is_valid_currency(data.currency):
            raise create_error(
                RegistrationErrorCode.CURRENCY_INVALID,
                f"Invalid currency code: {data.currency}",
                currency=data.currency,
            )

        if self.tenant_service.find_by_code(ctx, data.company_code) is not None:
            raise create_error(
                RegistrationErrorCode.CODE_EXISTS,
                f"Company code '{data.company_code}' is already registered",
                company_code=data.company_code,
            )

        self.get_default_tenant(ctx)

        if data.admin_email:
            self._check_email_available(ctx, data.admin_email, phone or data.admin_phone_number)

        self.logger.info(
            "Registration input validated", extra={"company_code": data.company_code}
        )

    def _check_email_available(self, ctx: RequestContext, email: str, phone: str) -> None:
        """The email may only be reused by the same phone identity."""
        administrator = ctx.session.execute(
            select(Administrator)
            .where(Administrator.email_address == email)
            .options(selectinload(Administrator.user))
        ).scalar_one_or_none()
        if administrator is None:
            return

        owner_identifier = administrator.user.identifier if administrator.user else None
        if owner_identifier != normalize_phone_number(phone):
            raise create_error(
                RegistrationErrorCode.EMAIL_EXISTS,
                f"Email '{email}' is already used by another administrator",
                email=email,
            )

    def get_default_tenant(self, ctx: RequestContext) -> Tenant:
        """
        Tenant whose zones new tenants inherit.

        The context tenant when it has both default zones, otherwise the first
        tenant in the system.

        Raises:
            RegistrationError: ZONES_MISSING
        """
        tenant = None
        if ctx.tenant_id:
            tenant = self.tenant_service.find_one(ctx, ctx.tenant_id, relations=_ZONE_RELATIONS)
        if tenant is None or not self._has_zones(tenant):
            tenant = self.tenant_service.find_first(ctx)

        if tenant is None or not self._has_zones(tenant):
            raise create_error(
                RegistrationErrorCode.ZONES_MISSING,
                "Default tenant with shipping and tax zones is not configured",
                tenant_id=getattr(tenant, "id", None),
            )
        return tenant

    @staticmethod
    def _has_zones(tenant: Tenant) -> bool:
        return bool(tenant.default_shipping_zone_id and tenant.default_tax_zone_id)
