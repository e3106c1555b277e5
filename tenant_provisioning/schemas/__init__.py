from .entity_schemas import PaymentMethodCreate, RoleCreate, StockLocationCreate, TenantCreate
from .registration_schema import ProvisionResult, RegistrationInput

__all__ = [
    "PaymentMethodCreate",
    "ProvisionResult",
    "RegistrationInput",
    "RoleCreate",
    "StockLocationCreate",
    "TenantCreate",
]
