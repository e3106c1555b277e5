"""
Create schemas accepted by the service layer.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import TenantStatus


class TenantCreate(BaseModel):
    code: str = Field(min_length=1, max_length=100)
    token: str = Field(min_length=1, max_length=100)
    default_currency_code: str = Field(min_length=3, max_length=3)
    default_language_code: str = "en"
    prices_include_tax: bool = False
    default_shipping_zone_id: Optional[str] = None
    default_tax_zone_id: Optional[str] = None
    seller_id: Optional[str] = None
    status: TenantStatus = TenantStatus.UNAPPROVED

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class StockLocationCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    @field_validator("name")
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Stock location name must not be blank")
        return v.strip()


class PaymentMethodCreate(BaseModel):
    code: str = Field(min_length=1, max_length=200)
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    enabled: bool = True
    handler_code: str = Field(min_length=1)
    handler_args: List[Any] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, extra="ignore")


class RoleCreate(BaseModel):
    code: str = Field(min_length=1, max_length=200)
    description: str = ""
    permissions: List[str] = Field(default_factory=list)
    tenant_ids: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True, extra="ignore")
