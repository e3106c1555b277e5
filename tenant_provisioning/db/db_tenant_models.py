"""
Tenant (sales channel) models and their many-to-many association tables.

Data structure only. Provisioning logic lives in the services and
provisioners.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Index, String, Table
from sqlalchemy.orm import relationship

from ..constants import TenantStatus
from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base

tenant_stock_locations = Table(
    "tenant_stock_locations",
    Base.metadata,
    Column("tenant_id", String(36), ForeignKey("tenant.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "stock_location_id",
        String(36),
        ForeignKey("stock_location.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

tenant_payment_methods = Table(
    "tenant_payment_methods",
    Base.metadata,
    Column("tenant_id", String(36), ForeignKey("tenant.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "payment_method_id",
        String(36),
        ForeignKey("payment_method.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Zone(Base, UUIDMixin, TimestampMixin):
    """Shipping/tax zone."""

    __tablename__ = "zone"

    name = Column(String(200), nullable=False, unique=True)


class Seller(Base, UUIDMixin, TimestampMixin):
    """Owning party of a tenant. Created upstream, never by provisioning."""

    __tablename__ = "seller"

    name = Column(String(200), nullable=False)

    tenants = relationship("Tenant", back_populates="seller")


class Tenant(Base, UUIDMixin, TimestampMixin):
    """Isolation boundary for one customer company."""

    __tablename__ = "tenant"

    code = Column(String(100), nullable=False, unique=True, index=True)
    token = Column(String(100), nullable=False, unique=True)
    default_currency_code = Column(String(3), nullable=False)
    default_language_code = Column(String(10), nullable=False, default="en")
    prices_include_tax = Column(Boolean, nullable=False, default=False)
    status = Column(String(20), nullable=False, default=TenantStatus.UNAPPROVED.value)

    default_shipping_zone_id = Column(String(36), ForeignKey("zone.id"), nullable=True)
    default_tax_zone_id = Column(String(36), ForeignKey("zone.id"), nullable=True)
    seller_id = Column(String(36), ForeignKey("seller.id"), nullable=True)

    default_shipping_zone = relationship("Zone", foreign_keys=[default_shipping_zone_id])
    default_tax_zone = relationship("Zone", foreign_keys=[default_tax_zone_id])
    seller = relationship("Seller", back_populates="tenants")

    stock_locations = relationship(
        "StockLocation", secondary=tenant_stock_locations, back_populates="tenants"
    )
    payment_methods = relationship(
        "PaymentMethod", secondary=tenant_payment_methods, back_populates="tenants"
    )
    roles = relationship("Role", secondary="role_tenants", back_populates="tenants")

    __table_args__ = (Index("ix_tenant_seller", "seller_id"),)
