"""
Centralized configuration management for the provisioning pipeline.

This module provides a unified configuration system with support for:
- Environment variables
- Feature flags
- Provisioning defaults
- Validation using Pydantic
"""

import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .constants import (
    SUPER_ADMIN_ROLE_CODE,
    EnvironmentVariable,
    LogLevel,
    PaymentHandlerCode,
    QueueName,
)


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.DATABASE_URL.value, "sqlite:///./provisioning.db"
        ),
        description="Database connection string",
    )
    pool_size: int = Field(default=5, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL statements")


class QueueConfig(BaseModel):
    """Queue configuration for Azure Storage Queues."""

    connection_string: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.AZURE_STORAGE_CONNECTION.value, ""),
        description="Azure Storage connection string",
    )
    notification_queue_name: str = Field(
        default=QueueName.NOTIFICATIONS.value, description="Queue for tenant notifications"
    )
    logs_queue_name: str = Field(default=QueueName.LOGS.value, description="Logs queue name")
    max_pending_events: int = Field(
        default=100, ge=1, description="Bound of the in-process notification buffer"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.LOG_LEVEL.value, LogLevel.INFO.value),
        description="Logging level",
    )
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    @field_validator("level")
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = {level.value for level in LogLevel}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class FeatureFlags(BaseModel):
    """Feature flags for controlling pipeline behavior."""

    enable_logs_queue: bool = Field(default=False, description="Ship logs to Azure queue")
    enable_scope_debug_logging: bool = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.SCOPE_DEBUG_LOGGING.value, "false"
        ).lower()
        == "true",
        description="Debug logs for owning-party scoped service calls",
    )
    enable_notifications: bool = Field(
        default=True, description="Emit admin/user created notifications"
    )
    enable_audit_logging: bool = Field(default=True, description="Record audit entries")


class ProvisioningConfig(BaseModel):
    """Defaults applied while provisioning a tenant."""

    default_country_code: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.DEFAULT_COUNTRY_CODE.value, "254"),
        description="Country calling code assumed for local phone numbers",
    )
    default_language_code: str = Field(default="en", description="Language of new tenants")
    payment_handlers: List[str] = Field(
        default_factory=lambda: [handler.value for handler in PaymentHandlerCode],
        description="Payment handler codes registered with the payment service",
    )
    super_admin_role_code: str = Field(
        default_factory=lambda: os.getenv(
            EnvironmentVariable.SUPER_ADMIN_ROLE_CODE.value, SUPER_ADMIN_ROLE_CODE
        ),
        description="Role that is granted access to every new tenant",
    )
    generated_password_length: int = Field(default=32, ge=16, le=128)
    password_hash_scheme: str = Field(default="pbkdf2_sha256")

    @field_validator("default_country_code")
    def validate_country_code(cls, v: str) -> str:
        """Country code is digits only, without a leading plus."""
        v = v.lstrip("+")
        if not v.isdigit():
            raise ValueError(f"Invalid country calling code: {v}")
        return v


class AppConfig(BaseModel):
    """Main application configuration."""

    environment: str = Field(
        default_factory=lambda: os.getenv(EnvironmentVariable.APP_ENV.value, "development"),
        description="Application environment",
    )
    debug: bool = Field(
        default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true",
        description="Debug mode",
    )

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    provisioning: ProvisioningConfig = Field(default_factory=ProvisioningConfig)

    custom: Dict[str, Any] = Field(default_factory=dict, description="Custom configuration values")

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create configuration from environment variables."""
        return cls()

    def get_custom(self, key: str, default: Any = None) -> Any:
        """Get a custom configuration value."""
        return self.custom.get(key, default)


# Global configuration instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def set_config(config: AppConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration instance."""
    global _config
    _config = None
