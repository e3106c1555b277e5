from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from .db_base import TimestampMixin, UUIDMixin
from .db_config import Base
from .db_tenant_models import tenant_stock_locations


class StockLocation(Base, UUIDMixin, TimestampMixin):
    """Physical store or warehouse."""

    __tablename__ = "stock_location"

    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")

    tenants = relationship(
        "Tenant", secondary=tenant_stock_locations, back_populates="stock_locations"
    )
