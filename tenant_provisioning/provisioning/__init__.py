from .access_provisioner import AccessProvisioner
from .context_adapter import ProvisioningContextAdapter, ProvisioningScopeError, ScopeErrorCode
from .payment_provisioner import PaymentProvisioner
from .registration_auditor import RegistrationAuditor
from .registration_errors import (
    RegistrationError,
    RegistrationErrorCode,
    create_error,
    is_registration_error,
    log_error,
    wrap_error,
)
from .registration_service import RegistrationService, RegistrationStep
from .registration_validator import RegistrationValidator
from .role_provisioner import (
    ADMIN_PERMISSIONS_VERSION,
    RepositoryRoleCreation,
    RoleProvisioner,
    ServiceRoleCreation,
    create_with_fallback,
    get_admin_permissions,
)
from .store_provisioner import StoreProvisioner
from .tenant_assignment import TenantAssignmentService
from .tenant_provisioner import TenantProvisioner

__all__ = [
    "ADMIN_PERMISSIONS_VERSION",
    "AccessProvisioner",
    "PaymentProvisioner",
    "ProvisioningContextAdapter",
    "ProvisioningScopeError",
    "RegistrationAuditor",
    "RegistrationError",
    "RegistrationErrorCode",
    "RegistrationService",
    "RegistrationStep",
    "RegistrationValidator",
    "RepositoryRoleCreation",
    "RoleProvisioner",
    "ScopeErrorCode",
    "ServiceRoleCreation",
    "StoreProvisioner",
    "TenantAssignmentService",
    "TenantProvisioner",
    "create_error",
    "create_with_fallback",
    "get_admin_permissions",
    "is_registration_error",
    "log_error",
    "wrap_error",
]
