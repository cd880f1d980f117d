"""Database engine and session management.

This module provides the SQLAlchemy 2.0 engine configuration and session
factory backing the persistent channel store. Channel reconciliation is
synchronous, so the engine and sessions are the blocking variants.

Usage:
    from notification_channels.database import create_session_factory
    from notification_channels.services.channel_store import SqlChannelStore

    store = SqlChannelStore(create_session_factory())
"""

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from notification_channels.config import get_database_echo, get_database_url
from notification_channels.models import Base


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores FOREIGN KEY constraints unless enabled per connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str | None = None, create_schema: bool = True) -> Engine:
    """Create the engine for the persistent channel store.

    Args:
        database_url: SQLAlchemy URL. Defaults to DATABASE_URL from environment.
        create_schema: Create missing tables. The registry is device-local,
            so a fresh SQLite file is initialized on first use; deployments
            using Alembic pass False.

    Returns:
        Configured Engine.
    """
    url = database_url or get_database_url()
    engine = create_engine(
        url,
        echo=get_database_echo(),
        pool_pre_ping=True,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    if create_schema:
        Base.metadata.create_all(engine)
    return engine


def create_session_factory(
    database_url: str | None = None,
    engine: Engine | None = None,
) -> sessionmaker[Session]:
    """Create a session factory bound to the channel store engine.

    Args:
        database_url: SQLAlchemy URL, used when no engine is given.
        engine: Existing engine to bind.

    Returns:
        sessionmaker producing Sessions with expire_on_commit=False.
    """
    bind = engine or create_db_engine(database_url)
    return sessionmaker(
        bind=bind,
        class_=Session,
        expire_on_commit=False,  # rows are converted to schemas after commit
    )


def create_test_engine(
    database_url: str = "sqlite:///:memory:",
) -> tuple[Engine, sessionmaker[Session]]:
    """Create an engine for testing.

    Uses StaticPool so every session shares the single in-memory database.

    Args:
        database_url: Test database URL (defaults to in-memory SQLite).

    Returns:
        Tuple of (engine, session_factory) with the schema already created.
    """
    test_engine = create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(test_engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(test_engine)
    test_session_factory = sessionmaker(
        bind=test_engine,
        class_=Session,
        expire_on_commit=False,
    )
    return test_engine, test_session_factory
