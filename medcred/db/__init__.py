"""Database module for the identity ledger."""

from medcred.db.models import Base, IdentityRecord
from medcred.db.session import (
    SessionLocal,
    create_db_engine,
    create_session_factory,
    engine,
    init_database,
    session_scope,
)

__all__ = [
    "Base",
    "IdentityRecord",
    "SessionLocal",
    "create_db_engine",
    "create_session_factory",
    "engine",
    "init_database",
    "session_scope",
]
