"""
Audit trail storage.
"""

from typing import Any, Dict, Optional

from ..config import get_config
from ..context.request_context import RequestContext
from ..db.db_audit_models import AuditLog
from ..utils.logger import get_logger


class AuditService:
    """Writes AuditLog rows in a savepoint so a failed write never poisons the caller."""

    def __init__(self):
        self.logger = get_logger()

    def log(
        self,
        ctx: RequestContext,
        event_type: str,
        entity_type: str,
        entity_id: Optional[str],
        tenant_id: Optional[str] = None,
        user_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        """
        Record one audit entry.

        Returns:
            The stored entry, or None when audit logging is disabled

        Raises:
            Any database error from the savepoint, after it has been rolled back
        """
        if not get_config().features.enable_audit_logging:
            return None

        entry = AuditLog(
            tenant_id=tenant_id if tenant_id is not None else ctx.tenant_id,
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            user_id=user_id,
            data=data or {},
        )
        with ctx.session.begin_nested():
            ctx.session.add(entry)

        self.logger.debug(
            f"Audit: {event_type}",
            extra={"entity_type": entity_type, "entity_id": entity_id, "audit_id": entry.id},
        )
        return entry
