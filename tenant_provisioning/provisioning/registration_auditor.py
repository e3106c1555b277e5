"""
Audit entries for entities created during registration.
"""

from typing import Any, Dict, Optional

from ..context.request_context import RequestContext
from ..services.audit_service import AuditService
from ..utils.logger import get_logger

_ENTITY_FIELDS = (
    "code",
    "token",
    "name",
    "description",
    "email_address",
    "identifier",
    "first_name",
    "last_name",
)


class RegistrationAuditor:
    """Records ``<entity>.created`` audit entries. Never raises."""

    def __init__(self, audit_service: Optional[AuditService] = None):
        self.audit_service = audit_service or AuditService()
        self.logger = get_logger()

    @staticmethod
    def extract_fields(entity: Any) -> Dict[str, Any]:
        """Identifying fields present on ``entity``."""
        data: Dict[str, Any] = {}
        if entity is None:
            return data
        for field in _ENTITY_FIELDS:
            value = getattr(entity, field, None)
            if value is not None:
                data[field] = value
        permissions = getattr(entity, "permissions", None)
        if isinstance(permissions, (list, tuple)):
            data["permission_count"] = len(permissions)
        return data

    def log_entity_created(
        self,
        ctx: RequestContext,
        entity_type: str,
        entity_id: Optional[str],
        entity: Any,
        extra: Optional[Dict[str, Any]] = None,
        tenant_id: Optional[str] = None,
    ) -> None:
        """
        Record the creation of ``entity``.

        ``tenant_id`` overrides the context tenant, which during registration
        is the default tenant rather than the one being provisioned.
        """
        try:
            data = {**self.extract_fields(entity), **(extra or {})}
            self.audit_service.log(
                ctx,
                event_type=f"{entity_type.lower()}.created",
                entity_type=entity_type,
                entity_id=str(entity_id) if entity_id is not None else None,
                tenant_id=tenant_id,
                user_id=None,
                data=data,
            )
        except Exception as e:
            self.logger.warning(
                f"Failed to audit {entity_type} creation: {str(e)}",
                extra={"entity_type": entity_type, "entity_id": entity_id},
            )
