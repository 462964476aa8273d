"""Database session management for the identity ledger.

This module provides SQLAlchemy engine and session management:
- create_db_engine(): Engine configured for the database type
- engine / SessionLocal: Process-wide engine and session factory
- session_scope(): Context manager committing on success
- init_database(): Idempotent table creation at startup
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from medcred.config import DATABASE_URL

log = logging.getLogger(__name__)


def create_db_engine(database_url: str = DATABASE_URL) -> Engine:
    """Create an engine for the given URL.

    PostgreSQL: connection pooling for production.
    SQLite: StaticPool with a single shared connection for local development.
    """
    if database_url.startswith("sqlite"):
        from sqlalchemy.pool import StaticPool

        engine_kwargs = {
            "echo": False,
            "pool_pre_ping": True,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    else:
        engine_kwargs = {
            "echo": False,
            "pool_pre_ping": True,
            "pool_size": 5,
            "max_overflow": 10,
            "pool_recycle": 1800,
        }

    db_engine = create_engine(database_url, **engine_kwargs)

    if database_url.startswith("sqlite"):
        @event.listens_for(db_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Configure SQLite PRAGMAs for local development."""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    return db_engine


def create_session_factory(db_engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


engine = create_db_engine()
SessionLocal = create_session_factory(engine)


@contextmanager
def session_scope(factory: sessionmaker = SessionLocal) -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with session_scope() as db:
            record = IdentityLedger(db).find_by_id(record_id)

    The session is committed on success and rolled back on exception.
    """
    db = factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_database(db_engine: Engine = engine, database_url: str = DATABASE_URL) -> None:
    """Create the ledger table if it does not exist.

    For SQLite: also ensures the database directory exists.
    """
    from medcred.db.models import Base

    log.info(f"Initializing database at {database_url.split('@')[-1]}")

    if database_url.startswith("sqlite:///"):
        db_path = database_url.replace("sqlite:///", "")
        if db_path and db_path != ":memory:":
            db_dir = Path(db_path).parent
            db_dir.mkdir(parents=True, exist_ok=True)

    Base.metadata.create_all(bind=db_engine)
    log.info("Database tables created successfully")
