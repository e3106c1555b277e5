"""
SQLAlchemy models and database management.

This module provides a common entry point for all models.
"""

from .db_access_models import Administrator, Role, User, role_tenants, user_roles
from .db_audit_models import AuditLog
from .db_base import JSON, TimestampMixin, UUIDMixin, utc_now
from .db_config import (
    Base,
    DatabaseConfig,
    DatabaseManager,
    get_db_manager,
    get_development_config,
    get_production_config,
    import_all_models,
    init_db,
    initialize_db,
    set_db_manager,
)
from .db_payment_models import PaymentMethod
from .db_store_models import StockLocation
from .db_tenant_models import (
    Seller,
    Tenant,
    Zone,
    tenant_payment_methods,
    tenant_stock_locations,
)

__all__ = [
    # Base definitions
    "Base",
    "JSON",
    "TimestampMixin",
    "UUIDMixin",
    "utc_now",
    # Configuration
    "DatabaseConfig",
    "DatabaseManager",
    "get_db_manager",
    "get_development_config",
    "get_production_config",
    "import_all_models",
    "init_db",
    "initialize_db",
    "set_db_manager",
    # Models
    "Administrator",
    "AuditLog",
    "PaymentMethod",
    "Role",
    "Seller",
    "StockLocation",
    "Tenant",
    "User",
    "Zone",
    # Association tables
    "role_tenants",
    "tenant_payment_methods",
    "tenant_stock_locations",
    "user_roles",
]
