from .operation_context import OperationContext, OperationHandler, operation
from .request_context import RequestContext
from .tenant_context import TenantContext, tenant_context

__all__ = [
    "OperationContext",
    "OperationHandler",
    "RequestContext",
    "TenantContext",
    "operation",
    "tenant_context",
]
