"""Identity ledger: at-most-once issuance, at-most-once retrieval.

The existence check in create() is only a fast path; two concurrent
submissions can both pass it. The unique index on registry_number is the
guard, and its IntegrityError is translated to the same conflict.
mark_retrieved() is a single conditional UPDATE so that two concurrent
retrievals cannot both succeed.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import exists, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from medcred.db.models import IdentityRecord
from medcred.exceptions import ConflictReason, IdentityConflict, NotFoundError

log = logging.getLogger(__name__)


class IdentityLedger:
    """Store for identity records.

    Records are keyed by an opaque id with a unique secondary lookup
    by registry number.
    """

    def __init__(self, db: Session):
        """Initialize store with database session.

        Args:
            db: SQLAlchemy session
        """
        self.db = db

    def find_by_registry_number(self, registry_number: str) -> Optional[IdentityRecord]:
        """Get the record for a registry number, if one was ever created."""
        return (
            self.db.query(IdentityRecord)
            .filter(IdentityRecord.registry_number == registry_number)
            .first()
        )

    def find_by_id(self, record_id: str) -> Optional[IdentityRecord]:
        """Get a record by its opaque id."""
        return self.db.query(IdentityRecord).filter(IdentityRecord.id == record_id).first()

    def _registry_number_taken(self, registry_number: str) -> bool:
        return self.db.query(
            exists().where(IdentityRecord.registry_number == registry_number)
        ).scalar()

    def create(
        self,
        record_id: str,
        registry_number: str,
        specialty_code: int,
        license: str,
        credential_type: str,
    ) -> IdentityRecord:
        """Create a new identity record.

        Args:
            record_id: Opaque UUID returned to the holder
            registry_number: NPI number, unique across the ledger
            specialty_code: Numeric specialty code
            license: License number from the primary taxonomy
            credential_type: "MD" or "DO"

        Returns:
            Created IdentityRecord

        Raises:
            IdentityConflict: A record already exists for registry_number
            IntegrityError: The row violates another constraint
        """
        if self.find_by_registry_number(registry_number) is not None:
            raise IdentityConflict(ConflictReason.DUPLICATE_IDENTITY)

        record = IdentityRecord(
            id=record_id,
            registry_number=registry_number,
            specialty_code=specialty_code,
            license=license,
            credential_type=credential_type,
        )
        self.db.add(record)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if not self._registry_number_taken(registry_number):
                # Not the registry_number index: check constraint or id collision
                log.error(f"Identity record insert rejected: {e.orig}")
                raise
            log.info("Concurrent duplicate identity rejected by unique index")
            raise IdentityConflict(ConflictReason.DUPLICATE_IDENTITY)
        self.db.refresh(record)
        log.info(f"Created identity record {record_id}")
        return record

    def mark_retrieved(self, record_id: str, retrieved_at: datetime) -> None:
        """Set retrieved_at once.

        Raises:
            NotFoundError: No record with this id
            IdentityConflict: The credential was already retrieved
        """
        result = self.db.execute(
            update(IdentityRecord)
            .where(
                IdentityRecord.id == record_id,
                IdentityRecord.retrieved_at.is_(None),
            )
            .values(retrieved_at=retrieved_at)
        )
        if result.rowcount == 1:
            self.db.commit()
            log.info(f"Marked identity record {record_id} as retrieved")
            return

        self.db.rollback()
        if self.find_by_id(record_id) is None:
            raise NotFoundError()
        raise IdentityConflict(ConflictReason.ALREADY_RETRIEVED)
