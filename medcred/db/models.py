"""SQLAlchemy ORM models for the identity ledger.

One table, keyed by an opaque UUID handed to the credential holder. The
registry number is a unique secondary key: the database, not the
application, guarantees one record per real-world identity.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class IdentityRecord(Base):
    """A verified practitioner awaiting (or past) credential retrieval.

    Append-only: rows are never deleted, and retrieved_at is the only
    column written after insert, exactly once.
    """

    __tablename__ = "identity_records"
    __table_args__ = (
        CheckConstraint(
            "credential_type IN ('MD', 'DO')", name="ck_identity_records_credential_type"
        ),
    )

    id = Column(String(36), primary_key=True)  # UUID, unrelated to registry_number
    registry_number = Column(String(32), nullable=False, unique=True, index=True)
    specialty_code = Column(Integer, nullable=False)
    license = Column(String(255), nullable=False)
    credential_type = Column(String(2), nullable=False)
    retrieved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    @property
    def is_retrieved(self) -> bool:
        return self.retrieved_at is not None

    def __repr__(self) -> str:
        # registry_number stays out of anything that reaches logs
        return f"<IdentityRecord(id={self.id!r}, retrieved={self.is_retrieved})>"
