"""Proof binding validation.

Ties the caller's plaintext claim (first and last name) to a proof over
government ID attributes. Public inputs of the name circuit:

    inputs[0]  Merkle root the credential was anchored under
    inputs[1]  address of the government ID issuer
    inputs[2]  first name, UTF-8 bytes as a big-endian integer
    inputs[3]  last name, same encoding

Checks run in a fixed order and stop at the first failure:
1. root recency (oracle)
2. proof validity (external verifier)
3. issuer address
4. first name, then last name
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from medcred.config import GOV_ID_ISSUER_ADDRESS, PROOF_MIN_INPUTS
from medcred.exceptions import ParameterError, ProofError, ProofFailure
from medcred.verification.fields import name_matches_input, to_field_int
from medcred.verification.oracle import RootsOracle
from medcred.verification.zk import ProofVerifier, VerificationKeySource

logger = logging.getLogger(__name__)


@dataclass
class ProofClaim:
    """A name claim submitted alongside its proof."""

    first_name: str
    last_name: str
    registry_number: str
    proof: dict

    @property
    def inputs(self) -> list:
        return self.proof["inputs"]


def _public_input(inputs: list, index: int) -> int:
    try:
        return to_field_int(inputs[index])
    except ValueError:
        raise ParameterError("MalformedProof")


def require_claim(
    first_name: Optional[str],
    last_name: Optional[str],
    registry_number: Optional[str],
    proof: Optional[Any],
) -> ProofClaim:
    """Check that a submission is structurally complete.

    Raises:
        ParameterError: A field is absent/empty, or the proof lacks four
            public inputs or a well-formed root
    """
    if not first_name or not last_name or not registry_number or not proof:
        raise ParameterError("MissingParameters")
    if not all(isinstance(v, str) for v in (first_name, last_name, registry_number)):
        raise ParameterError("MalformedParameters")

    if not isinstance(proof, dict):
        raise ParameterError("MalformedProof")
    inputs = proof.get("inputs")
    if not isinstance(inputs, list) or len(inputs) < PROOF_MIN_INPUTS:
        raise ParameterError("MalformedProof")
    # Only the root is needed before the recency check; the other inputs
    # are parsed by the checks that read them
    _public_input(inputs, 0)

    return ProofClaim(
        first_name=first_name,
        last_name=last_name,
        registry_number=registry_number,
        proof=proof,
    )


class ProofBindingValidator:
    """Validates a proof and binds it to the caller's name claim."""

    def __init__(
        self,
        oracle: RootsOracle,
        verifier: ProofVerifier,
        key_source: VerificationKeySource,
        issuer_address: str = GOV_ID_ISSUER_ADDRESS,
    ):
        self.oracle = oracle
        self.verifier = verifier
        self.key_source = key_source
        self.issuer = to_field_int(issuer_address)

    async def validate(self, claim: ProofClaim) -> None:
        """Run every binding check against an already-complete claim.

        Raises:
            ProofError: First failing check, with its reason
            ParameterError: An issuer or name input is not a field element
        """
        inputs = claim.inputs

        if not await self.oracle.root_is_recent(inputs[0]):
            raise ProofError(ProofFailure.STALE_ROOT)

        try:
            verification_key = await self.key_source.get()
            verified = await self.verifier.verify(verification_key, claim.proof)
        except Exception as e:
            logger.warning(f"Proof verifier unavailable: {type(e).__name__}: {e}")
            raise ProofError(ProofFailure.VERIFIER_UNAVAILABLE, detail=str(e)) from e
        if not verified:
            raise ProofError(ProofFailure.INVALID)

        if _public_input(inputs, 1) != self.issuer:
            raise ProofError(ProofFailure.ISSUER_MISMATCH)

        if not name_matches_input(claim.first_name, _public_input(inputs, 2)):
            raise ProofError(ProofFailure.NAME_MISMATCH_FIRST)
        if not name_matches_input(claim.last_name, _public_input(inputs, 3)):
            raise ProofError(ProofFailure.NAME_MISMATCH_LAST)
