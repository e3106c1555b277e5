from sqlalchemy import Column, DateTime, Index, String

from .db_base import JSON, UUIDMixin, utc_now
from .db_config import Base


class AuditLog(Base, UUIDMixin):
    """Append-only record of entity lifecycle events."""

    __tablename__ = "audit_log"

    tenant_id = Column(String(36), nullable=True)
    event_type = Column(String(100), nullable=False)
    entity_type = Column(String(100), nullable=False)
    entity_id = Column(String(36), nullable=True)
    user_id = Column(String(36), nullable=True)
    data = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    __table_args__ = (
        Index("ix_audit_log_tenant_event", "tenant_id", "event_type"),
        Index("ix_audit_log_entity", "entity_type", "entity_id"),
    )
