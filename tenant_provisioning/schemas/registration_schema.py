"""
Pydantic schemas for the registration request and its result.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrationInput(BaseModel):
    """
    Schema for a customer registration.

    Fields are only shape-checked here. Business rules (currency membership,
    code uniqueness, non-blank store name) are enforced by the pipeline so
    that they surface as registration error codes.
    """

    company_name: str = Field(min_length=1, max_length=200)
    company_code: str = Field(min_length=1, max_length=100)
    currency: str = Field(min_length=1, max_length=10)
    admin_first_name: str = Field(min_length=1, max_length=100)
    admin_last_name: str = Field(min_length=1, max_length=100)
    admin_phone_number: str = Field(min_length=1, max_length=30)
    admin_email: Optional[str] = Field(default=None, max_length=320)
    store_name: str = Field(default="", max_length=200)
    store_address: Optional[str] = Field(default=None, max_length=500)
    seller_id: Optional[str] = Field(
        default=None, description="Owning party created upstream; required to create the tenant"
    )

    model_config = ConfigDict(str_strip_whitespace=False, extra="ignore")

    @field_validator("company_code")
    def normalize_company_code(cls, v: str) -> str:
        return v.strip()

    @field_validator("currency")
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("admin_email")
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """Basic email validation. Blank means not given."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v


class ProvisionResult(BaseModel):
    """Ids of everything a successful registration created."""

    tenant_id: str
    store_id: str
    role_id: str
    admin_id: str
    user_id: str

    model_config = ConfigDict(frozen=True)
