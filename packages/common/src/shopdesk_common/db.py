"""
Database Connection and Session Management for SQLAlchemy.

This module sets up the engine and session factory for the shop's relational
store and provides the transactional scope that every workflow writes
through.

Key Components:
- **Engine**: `create_db_engine` builds one SQLAlchemy `Engine` from the
  configuration. The application creates it once at startup and disposes of
  it at shutdown; nothing here holds it in a module-level global.
- **Session Factory**: `make_session_factory` binds a `sessionmaker` to that
  engine. The factory is what gets passed around (inside the shop context),
  so components never reach for an ambient connection.
- **Transactional Context Manager**: `transaction` yields a `Session` inside
  a well-defined transactional scope, committing on success, rolling back on
  any exception, and always closing the session. Statement failures surface
  as `StoreError`.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import ShopdeskConfig
from .errors import StoreError
from .models import Base


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """SQLite leaves foreign keys unenforced unless asked on every connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(config: ShopdeskConfig | str) -> Engine:
    """
    Creates the SQLAlchemy engine for the store.

    The engine is configured with `pool_pre_ping=True` so that a connection
    dropped by the server is detected and replaced before it is used. For
    SQLite URLs foreign key enforcement is switched on for every connection.

    Args:
        config: The application configuration, or a SQLAlchemy URL string.

    Returns:
        Engine: A new engine. The caller owns it and must `dispose()` it.
    """
    url = config if isinstance(config, str) else config.get_database_url()
    engine = create_engine(url, pool_pre_ping=True)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Creates a session factory bound to `engine`.

    Sessions are configured with:
    - `autoflush=False`: statements are only sent when the code flushes or
      queries explicitly.
    - `expire_on_commit=False`: values read inside a transaction stay
      readable after it commits.
    """
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@contextmanager
def transaction(sessions: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Provides a transactional database session via a context manager.

    Usage:
    ```
    with transaction(ctx.sessions) as session:
        rid = next_id(session, EntityKind.SERVICE_REQUEST)
        session.add(ServiceRequest(rid=rid, ...))
    # When the block exits successfully, the transaction is committed.
    # If an exception is raised inside the block, the transaction is rolled
    # back, so a multi-statement write leaves no partial state behind.
    ```

    Raises:
        StoreError: If a statement or the commit fails. The SQLAlchemy error
            is chained as the cause.
    """
    session = sessions()
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        statement = getattr(exc, "statement", None)
        raise StoreError(f"Store operation failed: {exc.__class__.__name__}", statement) from exc
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_tables(engine: Engine) -> None:
    """
    Creates all tables defined in the SQLAlchemy declarative models.

    Only missing tables are created; existing tables are left untouched.
    """
    Base.metadata.create_all(bind=engine)


def drop_tables(engine: Engine) -> None:
    """
    Drops all tables defined in the SQLAlchemy declarative models.

    Warning:
        This permanently deletes every table and its data. Use only in
        development and tests.
    """
    Base.metadata.drop_all(bind=engine)


def init_db(engine: Engine) -> None:
    """An alias for `create_tables`, used by the schema bootstrap script."""
    create_tables(engine)
