"""Verification workflow: submit a claim, later retrieve its credential.

Per registry number the state moves NEW -> CREATED -> ISSUED:

- submit(): proof binding checks, then registry checks, then the ledger
  insert. The insert is the only write and the last gate.
- retrieve(): record lookup, credential derivation and signing, then the
  conditional retrieved_at update. The signed payload is released only if
  that update succeeds.

Gate failures propagate as IssuerError. Anything else raised by a
dependency is logged with the request id and re-raised as InternalError.
"""

import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from medcred.context import IssuerContext
from medcred.credentials.derive import derive_hash
from medcred.credentials.signer import build_credential_metadata, build_credential_response
from medcred.db.session import session_scope
from medcred.exceptions import (
    ConflictReason,
    IdentityConflict,
    InternalError,
    IssuerError,
    NotFoundError,
    ParameterError,
)
from medcred.ledger.store import IdentityLedger
from medcred.verification.proof import require_claim

log = logging.getLogger(__name__)


@contextmanager
def _gate(operation: str, request_id: str):
    """Translate unexpected dependency failures into InternalError."""
    try:
        yield
    except IssuerError as e:
        log.info(
            f"{operation} rejected: {e.code}:{e.reason}",
            extra={"request_id": request_id},
        )
        raise
    except Exception as e:
        log.error(
            f"{operation} failed: {type(e).__name__}: {e}",
            extra={"request_id": request_id},
            exc_info=True,
        )
        raise InternalError() from e


class VerificationWorkflow:
    """Composes validation, registry cross-check, ledger and signing."""

    def __init__(self, ctx: IssuerContext):
        self.ctx = ctx

    async def submit(
        self,
        first_name: Optional[str],
        last_name: Optional[str],
        registry_number: Optional[str],
        proof: Optional[Any],
        request_id: str = "-",
    ) -> str:
        """Validate a claim and record the identity.

        Returns:
            The opaque id used to retrieve the credential

        Raises:
            ParameterError, ProofError, RegistryError, IdentityConflict,
            InternalError
        """
        with _gate("submit", request_id):
            claim = require_claim(first_name, last_name, registry_number, proof)
            await self.ctx.validator.validate(claim)
            attributes = await self.ctx.registry.cross_check(
                claim.registry_number, claim.first_name, claim.last_name
            )

            record_id = str(uuid.uuid4())
            with session_scope(self.ctx.session_factory) as db:
                IdentityLedger(db).create(
                    record_id=record_id,
                    registry_number=attributes.registry_number,
                    specialty_code=attributes.specialty_code,
                    license=attributes.license,
                    credential_type=attributes.credential_type,
                )

        log.info(f"Identity recorded as {record_id}", extra={"request_id": request_id})
        return record_id

    async def retrieve(self, record_id: Optional[str], request_id: str = "-") -> dict:
        """Sign and hand off the credential for a recorded identity, once.

        Raises:
            ParameterError, NotFoundError, IdentityConflict, InternalError
        """
        with _gate("retrieve", request_id):
            if not record_id:
                raise ParameterError("MissingParameters")

            with session_scope(self.ctx.session_factory) as db:
                record = IdentityLedger(db).find_by_id(record_id)
                if record is None:
                    raise NotFoundError()
                if record.is_retrieved:
                    raise IdentityConflict(ConflictReason.ALREADY_RETRIEVED)

                derived = derive_hash(
                    record.registry_number, record.license, record.credential_type
                )
                specialty_code = record.specialty_code
                metadata = build_credential_metadata(record, derived)

            signed = await self.ctx.signer.issue(self.ctx.secret_key, specialty_code, derived)
            response = build_credential_response(signed, metadata)

            with session_scope(self.ctx.session_factory) as db:
                IdentityLedger(db).mark_retrieved(
                    record_id, datetime.now(timezone.utc).replace(tzinfo=None)
                )

        log.info(f"Credential retrieved for {record_id}", extra={"request_id": request_id})
        return response
