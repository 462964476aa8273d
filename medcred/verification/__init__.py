"""Proof verification module.

This module provides:
- ProofBindingValidator: binds a name claim to a government ID proof
- RootsOracle: on-chain root recency check
- RemoteProofVerifier / VerificationKeySource: external verifier clients
"""

from medcred.verification.fields import canonical_hex, encode_name, to_field_int
from medcred.verification.oracle import RootsOracle
from medcred.verification.proof import ProofBindingValidator, ProofClaim, require_claim
from medcred.verification.zk import ProofVerifier, RemoteProofVerifier, VerificationKeySource

__all__ = [
    "ProofBindingValidator",
    "ProofClaim",
    "ProofVerifier",
    "RemoteProofVerifier",
    "RootsOracle",
    "VerificationKeySource",
    "canonical_hex",
    "encode_name",
    "require_claim",
    "to_field_int",
]
