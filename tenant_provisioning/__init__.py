"""
Tenant provisioning.

Turns a customer registration into a tenant with its store, payment methods,
admin role and administrator, inside the caller's database transaction.
"""

from .config import AppConfig, get_config, reset_config, set_config
from .context.request_context import RequestContext
from .provisioning.registration_errors import RegistrationError, RegistrationErrorCode
from .provisioning.registration_service import RegistrationService
from .schemas.registration_schema import ProvisionResult, RegistrationInput

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ProvisionResult",
    "RegistrationError",
    "RegistrationErrorCode",
    "RegistrationInput",
    "RegistrationService",
    "RequestContext",
    "get_config",
    "reset_config",
    "set_config",
]
