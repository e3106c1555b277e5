from sqlalchemy import Boolean, Column, String, Text
from sqlalchemy.orm import relationship

from .db_base import JSON, TimestampMixin, UUIDMixin
from .db_config import Base
from .db_tenant_models import tenant_payment_methods


class PaymentMethod(Base, UUIDMixin, TimestampMixin):
    """Payment method bound to a handler such as cash or M-Pesa."""

    __tablename__ = "payment_method"

    code = Column(String(200), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=False, default="")
    enabled = Column(Boolean, nullable=False, default=True)
    handler_code = Column(String(100), nullable=False)
    handler_args = Column(JSON, nullable=False, default=list)

    tenants = relationship(
        "Tenant", secondary=tenant_payment_methods, back_populates="payment_methods"
    )
