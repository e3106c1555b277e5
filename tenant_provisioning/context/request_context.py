"""
Request context carried through every service and provisioner call.
"""

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session


class RequestContext(BaseModel):
    """
    Immutable per-request value.

    ``session`` is the caller's transaction handle and is shared by every
    copy. Scoped copies are made with ``scoped_to`` and never mutate the
    original.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    session: Session
    tenant_id: Optional[str] = None
    owning_party_id: Optional[str] = None
    active_user_id: Optional[str] = None
    correlation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    def scoped_to(self, tenant_id: str, owning_party_id: str) -> "RequestContext":
        """Copy of this context acting on ``tenant_id`` as ``owning_party_id``."""
        return self.model_copy(update={"tenant_id": tenant_id, "owning_party_id": owning_party_id})

    def for_tenant(self, tenant_id: Optional[str]) -> "RequestContext":
        return self.model_copy(update={"tenant_id": tenant_id})

    def describe(self) -> dict:
        """Loggable summary without the session."""
        return self.model_dump(exclude={"session"})
