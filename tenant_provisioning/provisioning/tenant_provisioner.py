"""
Creates the tenant (sales channel) for a registration.
"""

from typing import Optional

from sqlalchemy import select

from ..config import get_config
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_access_models import Role
from ..db.db_tenant_models import Tenant
from ..schemas.entity_schemas import TenantCreate
from ..schemas.registration_schema import RegistrationInput
from ..services.tenant_service import TenantService
from ..utils.logger import get_logger
from ..utils.relation_utils import assign_related
from .context_adapter import ProvisioningContextAdapter
from .registration_auditor import RegistrationAuditor
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error


class TenantProvisioner:
    def __init__(
        self,
        tenant_service: Optional[TenantService] = None,
        auditor: Optional[RegistrationAuditor] = None,
        context_adapter: Optional[ProvisioningContextAdapter] = None,
    ):
        self.tenant_service = tenant_service or TenantService()
        self.auditor = auditor or RegistrationAuditor()
        self.context_adapter = context_adapter or ProvisioningContextAdapter()
        self.logger = get_logger()

    @operation()
    def create_tenant(
        self,
        ctx: RequestContext,
        data: RegistrationInput,
        default_tenant: Tenant,
        phone: str,
    ) -> Tenant:
        """
        Create an UNAPPROVED tenant coded after the company.

        Zones and tax mode are inherited from ``default_tenant``. The owning
        party is the upstream ``seller_id``; it must exist and must not own
        another tenant yet.

        Raises:
            RegistrationError: TENANT_CREATE_FAILED
        """
        try:
            seller_id = self._resolve_seller_id(ctx, data)
            tenant = self.tenant_service.create(
                ctx,
                TenantCreate(
                    code=data.company_code,
                    token=data.company_code,
                    default_currency_code=data.currency,
                    default_language_code=get_config().provisioning.default_language_code,
                    prices_include_tax=True,
                    default_shipping_zone_id=default_tenant.default_shipping_zone_id,
                    default_tax_zone_id=default_tenant.default_tax_zone_id,
                    seller_id=seller_id,
                ),
            )
        except Exception as e:
            log_error(self.logger, "TenantProvisioner", e, "Tenant creation")
            raise wrap_error(
                e,
                RegistrationErrorCode.TENANT_CREATE_FAILED,
                f"Failed to create tenant '{data.company_code}'",
            )

        self.auditor.log_entity_created(
            ctx,
            "Tenant",
            tenant.id,
            tenant,
            extra={
                "company_name": data.company_name,
                "currency": data.currency,
                "admin_phone_number": phone,
                "seller_id": tenant.seller_id,
            },
            tenant_id=tenant.id,
        )
        self._grant_super_admin_access(ctx, tenant)
        return tenant

    def _resolve_seller_id(self, ctx: RequestContext, data: RegistrationInput) -> str:
        """The upstream owning party, checked to be unused. One seller per tenant."""
        if not data.seller_id:
            raise create_error(
                RegistrationErrorCode.TENANT_CREATE_FAILED,
                f"No owning party supplied for '{data.company_code}'",
                company_code=data.company_code,
            )

        seller = self.context_adapter.validate_seller_exists(ctx, data.seller_id)
        owned_tenant_id = ctx.session.execute(
            select(Tenant.id).where(Tenant.seller_id == seller.id).limit(1)
        ).scalar_one_or_none()
        if owned_tenant_id is not None:
            raise create_error(
                RegistrationErrorCode.TENANT_CREATE_FAILED,
                f"Owning party {seller.id} already owns tenant {owned_tenant_id}",
                seller_id=seller.id,
                tenant_id=owned_tenant_id,
            )
        return seller.id

    def _grant_super_admin_access(self, ctx: RequestContext, tenant: Tenant) -> None:
        """Attach ``tenant`` to the super-admin role. Failure is logged, not raised."""
        role_code = get_config().provisioning.super_admin_role_code
        try:
            with ctx.session.begin_nested():
                role_id = ctx.session.execute(
                    select(Role.id).where(Role.code == role_code)
                ).scalar_one_or_none()
                if role_id is None:
                    self.logger.warning(
                        "Super admin role not found, tenant not attached",
                        extra={"tenant_id": tenant.id, "role_code": role_code},
                    )
                    return
                assign_related(ctx.session, ctx, role_id, "tenants", tenant.id, parent_model=Role)
        except Exception as e:
            self.logger.warning(
                f"Failed to add tenant {tenant.id} to super admin role: {str(e)}",
                extra={"tenant_id": tenant.id, "role_code": role_code},
            )
