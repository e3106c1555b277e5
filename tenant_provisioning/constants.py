"""
Constants and enums for the tenant provisioning pipeline.

This module centralizes magic strings shared by the models, services and
provisioners so that every layer agrees on the same values.
"""

from enum import Enum


class QueueName(str, Enum):
    """Azure Storage queue names used by the pipeline."""

    LOGS = "logs-queue"
    NOTIFICATIONS = "notifications-queue"


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    AZURE_STORAGE_CONNECTION = "AzureWebJobsStorage"
    DATABASE_URL = "DATABASE_URL"
    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEFAULT_COUNTRY_CODE = "DEFAULT_COUNTRY_CODE"
    SUPER_ADMIN_ROLE_CODE = "SUPER_ADMIN_ROLE_CODE"
    SCOPE_DEBUG_LOGGING = "PROVISIONING_SCOPE_DEBUG"


class TenantStatus(str, Enum):
    """Approval state of a tenant."""

    UNAPPROVED = "UNAPPROVED"
    APPROVED = "APPROVED"
    BANNED = "BANNED"


class PaymentHandlerCode(str, Enum):
    """Payment handlers every new tenant gets a method for."""

    CASH = "cash"
    MPESA = "mpesa"


class Permission(str, Enum):
    """Permissions that can be granted through a role."""

    CREATE_ASSET = "CreateAsset"
    READ_ASSET = "ReadAsset"
    UPDATE_ASSET = "UpdateAsset"
    DELETE_ASSET = "DeleteAsset"
    CREATE_CATALOG = "CreateCatalog"
    READ_CATALOG = "ReadCatalog"
    UPDATE_CATALOG = "UpdateCatalog"
    DELETE_CATALOG = "DeleteCatalog"
    CREATE_CUSTOMER = "CreateCustomer"
    READ_CUSTOMER = "ReadCustomer"
    UPDATE_CUSTOMER = "UpdateCustomer"
    DELETE_CUSTOMER = "DeleteCustomer"
    CREATE_ORDER = "CreateOrder"
    READ_ORDER = "ReadOrder"
    UPDATE_ORDER = "UpdateOrder"
    DELETE_ORDER = "DeleteOrder"
    CREATE_PRODUCT = "CreateProduct"
    READ_PRODUCT = "ReadProduct"
    UPDATE_PRODUCT = "UpdateProduct"
    DELETE_PRODUCT = "DeleteProduct"
    CREATE_STOCK_LOCATION = "CreateStockLocation"
    READ_STOCK_LOCATION = "ReadStockLocation"
    UPDATE_STOCK_LOCATION = "UpdateStockLocation"
    DELETE_STOCK_LOCATION = "DeleteStockLocation"
    READ_SETTINGS = "ReadSettings"
    UPDATE_SETTINGS = "UpdateSettings"
    SUPER_ADMIN = "SuperAdmin"


SUPER_ADMIN_ROLE_CODE = "__super_admin_role__"

# ISO 4217 active codes
_ISO_4217_CODES = """
AED AFN ALL AMD ANG AOA ARS AUD AWG AZN BAM BBD BDT BGN BHD BIF BMD BND BOB BRL
BSD BTN BWP BYN BZD CAD CDF CHF CLP CNY COP CRC CUC CUP CVE CZK DJF DKK DOP DZD
EGP ERN ETB EUR FJD FKP GBP GEL GHS GIP GMD GNF GTQ GYD HKD HNL HRK HTG HUF IDR
ILS INR IQD IRR ISK JMD JOD JPY KES KGS KHR KMF KPW KRW KWD KYD KZT LAK LBP LKR
LRD LSL LYD MAD MDL MGA MKD MMK MNT MOP MRU MUR MVR MWK MXN MYR MZN NAD NGN NIO
NOK NPR NZD OMR PAB PEN PGK PHP PKR PLN PYG QAR RON RSD RUB RWF SAR SBD SCR SDG
SEK SGD SHP SLL SOS SRD SSP STN SVC SYP SZL THB TJS TMT TND TOP TRY TTD TWD TZS
UAH UGX USD UYU UZS VES VND VUV WST XAF XCD XOF XPF YER ZAR ZMW ZWL
"""

CurrencyCode = Enum(  # type: ignore[misc]
    "CurrencyCode",
    [(code, code) for code in _ISO_4217_CODES.split()],
    type=str,
    module=__name__,
)
CurrencyCode.__doc__ = "Closed enumeration of accepted tenant currencies."


def is_valid_currency(code: str) -> bool:
    """Return True when ``code`` is a member of ``CurrencyCode``."""
    return code in CurrencyCode.__members__
