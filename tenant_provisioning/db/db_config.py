import os
from contextlib import contextmanager
from typing import Any, Generator, Optional

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from ..exceptions import ErrorCode, ServiceError, ValidationError
from ..utils.logger import get_logger

# Base class for all SQLAlchemy models
Base: Any = declarative_base()


class DatabaseConfig(BaseModel):
    db_type: str = "postgres"
    database: str = ""
    host: str = ""
    port: str = "5432"
    username: str = ""
    password: str = ""
    connection_string: Optional[str] = None
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 30
    echo: bool = False
    development_mode: bool = False

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def get_connection_string(self) -> str:
        if self.connection_string:
            return self.connection_string
        if self.db_type.lower() == "postgres":
            if not all([self.host, self.database, self.username, self.password]):
                raise ValidationError(
                    "Missing required Postgres configuration parameters",
                    error_code=ErrorCode.MISSING_REQUIRED,
                    field="database_config",
                    value={"host": self.host, "database": self.database, "username": self.username},
                )
            return (
                f"postgresql://{self.username}:{self.password}@"
                f"{self.host}:{self.port}/{self.database}"
            )
        elif self.db_type.lower() == "sqlite":
            return f"sqlite:///{self.database}"
        raise ValidationError(
            f"Unsupported database type: {self.db_type}",
            error_code=ErrorCode.INVALID_FORMAT,
            field="db_type",
            value=self.db_type,
        )

    @property
    def is_sqlite(self) -> bool:
        return self.get_connection_string().startswith("sqlite")

    def __repr__(self) -> str:
        """String representation with masked password."""
        return (
            f"DatabaseConfig("
            f"db_type='{self.db_type}', "
            f"host='{self.host}', "
            f"port='{self.port}', "
            f"database='{self.database}', "
            f"username='{self.username}', "
            f"password='***')"
        )


def _enable_sqlite_savepoints(engine) -> None:
    """
    Let SQLAlchemy own BEGIN on pysqlite so SAVEPOINT works.

    Audit writes and the super-admin attachment run in nested transactions.
    """

    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")


class DatabaseManager:
    """
    Database connection manager that uses a Pydantic DatabaseConfig.
    """

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self.engine = self._create_engine()
        self.session_factory = sessionmaker(bind=self.engine)
        self.scoped_session = scoped_session(self.session_factory)

    def _create_engine(self):
        connection_string = self.config.get_connection_string()
        if self.config.is_sqlite:
            connect_args = {"check_same_thread": False}
            if ":memory:" in connection_string or connection_string == "sqlite://":
                engine = create_engine(
                    connection_string,
                    echo=self.config.echo,
                    connect_args=connect_args,
                    poolclass=StaticPool,
                )
            else:
                engine = create_engine(
                    connection_string, echo=self.config.echo, connect_args=connect_args
                )
            _enable_sqlite_savepoints(engine)
            return engine
        return create_engine(
            connection_string,
            echo=self.config.echo,
            pool_size=self.config.pool_size,
            max_overflow=self.config.max_overflow,
            pool_timeout=self.config.pool_timeout,
        )

    def create_tables(self) -> None:
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        if self.config.development_mode:
            Base.metadata.drop_all(self.engine)
        else:
            raise ServiceError(
                "Cannot drop tables: not in development mode",
                error_code=ErrorCode.CONFIGURATION_ERROR,
                operation="drop_tables",
                development_mode=self.config.development_mode,
            )

    def get_session(self) -> Session:
        return self.scoped_session()

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Run a unit of work in one transaction.

        Commits when the block exits cleanly, rolls back on any exception
        and re-raises it.
        """
        session = self.session_factory()
        try:
            with session.begin():
                yield session
        finally:
            session.close()

    def close_session(self, session: Optional[Session] = None) -> None:
        if session:
            session.close()
        else:
            self.scoped_session.remove()

    def close(self) -> None:
        self.scoped_session.remove()
        self.engine.dispose()


def get_development_config() -> DatabaseConfig:
    """
    Get SQLite configuration for development.
    """
    return DatabaseConfig(
        db_type="sqlite",
        database=os.environ.get("DEV_DB_PATH", ":memory:"),
        echo=os.environ.get("DB_ECHO", "False").lower() == "true",
        development_mode=True,
    )


def get_production_config() -> DatabaseConfig:
    """
    Get database configuration for production from the application config.
    """
    app_db = get_config().database
    return DatabaseConfig(
        connection_string=app_db.connection_string,
        pool_size=app_db.pool_size,
        max_overflow=app_db.max_overflow,
        pool_timeout=app_db.pool_timeout,
        echo=app_db.echo,
        development_mode=False,
    )


def import_all_models():
    """Import all models to ensure they're registered with SQLAlchemy metadata."""
    from sqlalchemy.orm import configure_mappers

    from .db_access_models import Administrator, Role, User  # noqa
    from .db_audit_models import AuditLog  # noqa
    from .db_payment_models import PaymentMethod  # noqa
    from .db_store_models import StockLocation  # noqa
    from .db_tenant_models import Seller, Tenant, Zone  # noqa

    configure_mappers()


def init_db(db_manager: DatabaseManager) -> None:
    """
    Initialize the database, creating all tables.

    Args:
        db_manager: DatabaseManager instance to use for table creation
    """
    get_logger().info("Initializing DB")
    import_all_models()
    db_manager.create_tables()


# Global database manager instance
_db_manager: Optional[DatabaseManager] = None


def get_db_manager() -> DatabaseManager:
    """
    Get the global database manager instance.

    Raises:
        ServiceError: If no database manager has been initialized
    """
    if _db_manager is None:
        raise ServiceError(
            "Database manager not initialized. Call initialize_db() first.",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            operation="get_db_manager",
        )
    return _db_manager


def set_db_manager(manager: Optional[DatabaseManager]) -> None:
    """Set the global database manager instance (used by tests)."""
    global _db_manager
    _db_manager = manager


def initialize_db(config: Optional[DatabaseConfig] = None) -> DatabaseManager:
    """
    Initialize the global database manager with the given config.

    Args:
        config: Optional DatabaseConfig. If None, uses production config.
    """
    global _db_manager

    if config is None:
        config = get_production_config()

    _db_manager = DatabaseManager(config)
    init_db(_db_manager)
    return _db_manager


def close_db() -> None:
    """Close the database connections and dispose of the engine."""
    global _db_manager
    if _db_manager:
        _db_manager.close()
        _db_manager = None
