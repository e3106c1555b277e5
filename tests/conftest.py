"""
Shared pytest fixtures.

Every test gets a fresh in-memory SQLite database, a clean application
config and a recording event router so nothing reaches Azure.
"""

from typing import List

import pytest
from sqlalchemy.orm import Session

from tenant_provisioning.config import AppConfig, QueueConfig, reset_config, set_config
from tenant_provisioning.context import RequestContext, TenantContext
from tenant_provisioning.db import DatabaseConfig, DatabaseManager
from tenant_provisioning.db.db_config import close_db, initialize_db
from tenant_provisioning.events import ChannelEvent, set_event_router
from tenant_provisioning.exceptions import clear_correlation_id
from tenant_provisioning.utils.logger import reset_logging
from tests.fixtures.factories import (
    RegistrationInputFactory,
    SellerFactory,
    bind_factories,
    seed_platform,
)


class RecordingEventRouter:
    """EventRouter that keeps what it was given."""

    def __init__(self):
        self.events: List[ChannelEvent] = []

    def route_event(self, event: ChannelEvent) -> None:
        self.events.append(event)

    @property
    def event_types(self) -> List[str]:
        return [event.type.value for event in self.events]


# ==================== CONFIG / GLOBAL STATE ====================


@pytest.fixture(autouse=True)
def app_config():
    """Fresh config per test; no queue connection string."""
    config = AppConfig(queue=QueueConfig(connection_string=""))
    set_config(config)
    yield config
    reset_config()
    reset_logging()
    TenantContext.clear_current_tenant()
    clear_correlation_id()


@pytest.fixture(autouse=True)
def recording_router():
    """Installed as the process-wide event router for the test."""
    router = RecordingEventRouter()
    set_event_router(router)
    yield router
    set_event_router(None)


# ==================== DATABASE ====================


@pytest.fixture
def db_config() -> DatabaseConfig:
    """SQLite in-memory database, fresh for every test."""
    return DatabaseConfig(db_type="sqlite", database=":memory:", development_mode=True)


@pytest.fixture
def db_manager(db_config: DatabaseConfig) -> DatabaseManager:
    """Global database manager with every table created."""
    manager = initialize_db(db_config)
    yield manager
    close_db()


@pytest.fixture
def db_session(db_manager: DatabaseManager) -> Session:
    """Session bound to the test database; factories flush into it."""
    session = db_manager.session_factory()
    bind_factories(session)
    yield session
    session.rollback()
    session.close()


# ==================== SEEDED DATA ====================


@pytest.fixture
def platform(db_session):
    """Default tenant with zones and seller, plus a super admin user."""
    return seed_platform(db_session)


@pytest.fixture
def default_tenant(platform):
    return platform.default_tenant


@pytest.fixture
def ctx(db_session, platform):
    """Request context of the super admin acting on the default tenant."""
    return RequestContext(
        session=db_session,
        tenant_id=platform.default_tenant.id,
        active_user_id=platform.super_admin.id,
    )


@pytest.fixture
def company_seller(db_session):
    """Owning party an upstream step created for the registering company."""
    return SellerFactory(name="Acme Ltd Seller")


@pytest.fixture
def registration_input(company_seller):
    return RegistrationInputFactory(seller_id=company_seller.id)
