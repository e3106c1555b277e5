"""
Creates the tenant admin role.

Creation is attempted through ``RoleService`` first. The service checks the
acting user's cached tenant permissions, which may not include the tenant
created moments earlier in the same transaction; in that case the role is
inserted directly and linked with the relation helper.
"""

from typing import List, Optional, Protocol, Tuple

from ..constants import Permission
from ..context.operation_context import operation
from ..context.request_context import RequestContext
from ..db.db_access_models import Role
from ..schemas.entity_schemas import RoleCreate
from ..schemas.registration_schema import RegistrationInput
from ..services.role_service import RoleService
from ..services.tenant_service import TenantService
from ..utils.logger import get_logger
from .context_adapter import ProvisioningContextAdapter
from .registration_auditor import RegistrationAuditor
from .registration_errors import RegistrationErrorCode, create_error, log_error, wrap_error
from .tenant_assignment import TenantAssignmentService

ADMIN_PERMISSIONS_VERSION = 1

ADMIN_PERMISSIONS: Tuple[Permission, ...] = (
    # Assets
    Permission.CREATE_ASSET,
    Permission.READ_ASSET,
    Permission.UPDATE_ASSET,
    Permission.DELETE_ASSET,
    # Catalog
    Permission.CREATE_CATALOG,
    Permission.READ_CATALOG,
    Permission.UPDATE_CATALOG,
    Permission.DELETE_CATALOG,
    # Customers
    Permission.CREATE_CUSTOMER,
    Permission.READ_CUSTOMER,
    Permission.UPDATE_CUSTOMER,
    Permission.DELETE_CUSTOMER,
    # Orders, covers payments and fulfillments
    Permission.CREATE_ORDER,
    Permission.READ_ORDER,
    Permission.UPDATE_ORDER,
    Permission.DELETE_ORDER,
    # Products, covers variants
    Permission.CREATE_PRODUCT,
    Permission.READ_PRODUCT,
    Permission.UPDATE_PRODUCT,
    Permission.DELETE_PRODUCT,
    # Stock locations (no delete)
    Permission.CREATE_STOCK_LOCATION,
    Permission.READ_STOCK_LOCATION,
    Permission.UPDATE_STOCK_LOCATION,
    # Settings
    Permission.READ_SETTINGS,
    Permission.UPDATE_SETTINGS,
)


def get_admin_permissions() -> List[str]:
    """Permissions granted to a new tenant's admin role."""
    return [permission.value for permission in ADMIN_PERMISSIONS]


def admin_role_code(company_code: str) -> str:
    return f"{company_code}-admin"


class RoleCreationStrategy(Protocol):
    name: str

    def create(self, ctx: RequestContext, tenant_id: str, data: RoleCreate) -> Role: ...


class ServiceRoleCreation:
    """RoleService with the tenant passed inline, under the tenant owner's scope."""

    name = "service"

    def __init__(self, role_service: RoleService, context_adapter: ProvisioningContextAdapter):
        self.role_service = role_service
        self.context_adapter = context_adapter

    def create(self, ctx: RequestContext, tenant_id: str, data: RoleCreate) -> Role:
        role_data = data.model_copy(update={"tenant_ids": [tenant_id]})
        return self.context_adapter.with_owning_party_scope(
            ctx,
            tenant_id,
            lambda scoped: self.role_service.create(scoped, role_data),
            operation_name="create_role",
        )


class RepositoryRoleCreation:
    """Plain insert, then link the tenant through the association table."""

    name = "repository"

    def __init__(self, assignment: TenantAssignmentService):
        self.assignment = assignment

    def create(self, ctx: RequestContext, tenant_id: str, data: RoleCreate) -> Role:
        role = Role(
            code=data.code, description=data.description, permissions=list(data.permissions)
        )
        ctx.session.add(role)
        ctx.session.flush()
        self.assignment.assign_role_to_tenant(ctx, role.id, tenant_id)
        return role


def create_with_fallback(
    ctx: RequestContext,
    tenant_id: str,
    data: RoleCreate,
    primary: RoleCreationStrategy,
    fallback: RoleCreationStrategy,
    logger=None,
) -> Tuple[Role, str]:
    """
    Create with ``primary``; on any failure undo its writes and use ``fallback``.

    Returns:
        The role and the name of the strategy that created it
    """
    logger = logger or get_logger()
    try:
        with ctx.session.begin_nested():
            return primary.create(ctx, tenant_id, data), primary.name
    except Exception as e:
        logger.warning(
            f"Role creation via {primary.name} failed, falling back to {fallback.name}: {str(e)}",
            extra={"role_code": data.code, "tenant_id": tenant_id},
        )
    return fallback.create(ctx, tenant_id, data), fallback.name


class RoleProvisioner:
    def __init__(
        self,
        role_service: Optional[RoleService] = None,
        tenant_service: Optional[TenantService] = None,
        context_adapter: Optional[ProvisioningContextAdapter] = None,
        assignment: Optional[TenantAssignmentService] = None,
        auditor: Optional[RegistrationAuditor] = None,
    ):
        self.tenant_service = tenant_service or TenantService()
        self.assignment = assignment or TenantAssignmentService()
        self.auditor = auditor or RegistrationAuditor()
        self.logger = get_logger()
        self.primary: RoleCreationStrategy = ServiceRoleCreation(
            role_service or RoleService(), context_adapter or ProvisioningContextAdapter()
        )
        self.fallback: RoleCreationStrategy = RepositoryRoleCreation(self.assignment)

    @operation()
    def create_admin_role(
        self, ctx: RequestContext, data: RegistrationInput, tenant_id: str
    ) -> Role:
        """
        Create ``<company_code>-admin`` with the admin permission set on ``tenant_id``.

        Raises:
            RegistrationError: ROLE_CREATE_FAILED or ROLE_ASSIGN_FAILED
        """
        try:
            if self.tenant_service.find_one(ctx, tenant_id) is None:
                raise create_error(
                    RegistrationErrorCode.ROLE_CREATE_FAILED, f"Tenant {tenant_id} not found"
                )

            role_data = RoleCreate(
                code=admin_role_code(data.company_code),
                description=f"Full admin access for {data.company_name}",
                permissions=get_admin_permissions(),
            )
            role, strategy = create_with_fallback(
                ctx, tenant_id, role_data, self.primary, self.fallback, self.logger
            )
            self.logger.info(
                f"Role created via {strategy}: {role.code}",
                extra={"role_id": role.id, "tenant_id": tenant_id, "strategy": strategy},
            )

            self.assignment.verify_role_tenant(ctx, role.id, tenant_id)
        except Exception as e:
            log_error(self.logger, "RoleProvisioner", e, "Role creation")
            raise wrap_error(e, RegistrationErrorCode.ROLE_CREATE_FAILED)

        self.auditor.log_entity_created(
            ctx,
            "Role",
            role.id,
            role,
            extra={
                "company_code": data.company_code,
                "company_name": data.company_name,
                "strategy": strategy,
                "permissions_version": ADMIN_PERMISSIONS_VERSION,
            },
            tenant_id=tenant_id,
        )
        return role
