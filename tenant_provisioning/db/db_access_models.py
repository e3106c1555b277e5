"""
Access control models: roles, users and administrators.
"""

from sqlalchemy import Boolean, Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from .db_base import JSON, TimestampMixin, UUIDMixin
from .db_config import Base

role_tenants = Table(
    "role_tenants",
    Base.metadata,
    Column("role_id", String(36), ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
    Column("tenant_id", String(36), ForeignKey("tenant.id", ondelete="CASCADE"), primary_key=True),
)

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        String(36),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("role_id", String(36), ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base, UUIDMixin, TimestampMixin):
    """Named permission set granted on one or more tenants."""

    __tablename__ = "role"

    code = Column(String(200), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False, default="")
    permissions = Column(JSON, nullable=False, default=list)

    tenants = relationship("Tenant", secondary=role_tenants, back_populates="roles")
    users = relationship("User", secondary=user_roles, back_populates="roles")


class User(Base, UUIDMixin, TimestampMixin):
    """Login identity. Provisioned users authenticate by OTP to ``identifier``."""

    __tablename__ = "user_account"

    identifier = Column(String(200), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    verified = Column(Boolean, nullable=False, default=False)

    roles = relationship("Role", secondary=user_roles, back_populates="users")
    administrator = relationship("Administrator", back_populates="user", uselist=False)


class Administrator(Base, UUIDMixin, TimestampMixin):
    """Admin profile linked one-to-one with a User."""

    __tablename__ = "administrator"

    email_address = Column(String(320), nullable=False, unique=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    user_id = Column(String(36), ForeignKey("user_account.id"), nullable=False, unique=True)

    user = relationship("User", back_populates="administrator")
