from .audit_service import AuditService
from .base_service import BaseService
from .payment_method_service import PaymentMethodService
from .permission_service import PermissionService
from .role_service import RoleService
from .stock_location_service import StockLocationService
from .tenant_service import TenantService

__all__ = [
    "AuditService",
    "BaseService",
    "PaymentMethodService",
    "PermissionService",
    "RoleService",
    "StockLocationService",
    "TenantService",
]
