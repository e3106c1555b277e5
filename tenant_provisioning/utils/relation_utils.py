"""
Many-to-many assignment that stays visible inside the current transaction.

The service layer caches what each user can see, so a relation created
through the ORM's collection API is not guaranteed to be read back by the
next step. These helpers write the association row directly, refresh the
owning side, and let callers re-read the relation before moving on.
"""

from typing import Any, Optional, Type

from sqlalchemy import inspect, insert, select
from sqlalchemy.orm import Session, selectinload

from ..db.db_tenant_models import Tenant
from ..exceptions import ErrorCode, ValidationError
from .logger import get_logger

logger = get_logger()


def _relationship(parent_model: Type[Any], relation_name: str):
    relationships = inspect(parent_model).relationships
    if relation_name not in relationships:
        return None
    return relationships[relation_name]


def _association_values(rel, parent_id: str, child_id: str) -> dict:
    """Column values for one row of ``rel.secondary`` linking parent and child."""
    values = {assoc_col.name: parent_id for _, assoc_col in rel.synchronize_pairs}
    values.update({assoc_col.name: child_id for _, assoc_col in rel.secondary_synchronize_pairs})
    return values


def _pair_exists(session: Session, rel, values: dict) -> bool:
    table = rel.secondary
    stmt = select(table).where(
        *[table.c[name] == value for name, value in values.items()]
    )
    return session.execute(stmt).first() is not None


def assign_related(
    session: Session,
    ctx: Any,
    parent_id: str,
    relation_name: str,
    child_id: str,
    parent_model: Type[Any] = Tenant,
) -> None:
    """
    Link ``child_id`` to ``parent_id`` through ``relation_name``.

    Assigning an existing pair is a no-op.

    Args:
        session: Active session; the caller owns the transaction
        ctx: Request context, used for log context only
        parent_id: Id of the owning entity (a Tenant unless ``parent_model`` says otherwise)
        relation_name: Name of a many-to-many relationship on ``parent_model``
        child_id: Id of the entity to link

    Raises:
        ValidationError: If the relation is unknown or not a many-to-many
    """
    rel = _relationship(parent_model, relation_name)
    if rel is None or rel.secondary is None:
        raise ValidationError(
            f"{parent_model.__name__}.{relation_name} is not a many-to-many relation",
            field="relation_name",
            error_code=ErrorCode.INVALID_FORMAT,
            parent_model=parent_model.__name__,
            relation_name=relation_name,
        )

    values = _association_values(rel, parent_id, child_id)
    log_extra = {
        "parent_model": parent_model.__name__,
        "parent_id": parent_id,
        "relation_name": relation_name,
        "child_id": child_id,
        "correlation_id": getattr(ctx, "correlation_id", None),
    }

    if _pair_exists(session, rel, values):
        logger.debug("Relation already assigned", extra=log_extra)
        return

    session.execute(insert(rel.secondary).values(**values))

    parent = session.get(parent_model, parent_id)
    if parent is not None:
        session.expire(parent, [relation_name])
    session.flush()

    logger.debug("Relation assigned", extra=log_extra)


def verify_related(
    session: Session,
    ctx: Any,
    parent_id: str,
    relation_name: str,
    child_id: str,
    parent_model: Type[Any] = Tenant,
) -> bool:
    """
    Re-read ``relation_name`` from the database and check ``child_id`` is in it.

    Returns False when the parent is missing, the relation is unknown or not
    a collection, or the child is absent. Read only.
    """
    rel = _relationship(parent_model, relation_name)
    if rel is None:
        logger.warning(
            "Unknown relation during verification",
            extra={"parent_model": parent_model.__name__, "relation_name": relation_name},
        )
        return False

    parent: Optional[Any] = session.execute(
        select(parent_model)
        .where(parent_model.id == parent_id)
        .options(selectinload(getattr(parent_model, relation_name)))
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if parent is None:
        return False

    related = getattr(parent, relation_name, None)
    if not isinstance(related, list):
        return False

    return any(str(item.id) == str(child_id) for item in related)
