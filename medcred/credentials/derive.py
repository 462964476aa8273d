"""Deterministic derived attribute for issued credentials.

Downstream verifiers recompute this value from the raw attributes, so the
encoding below is fixed: each input is UTF-8 encoded and prefixed with its
4-byte big-endian length, the three are hashed with SHA-256 in the order
(registry number, license, credential type), and the digest is reduced
into the BN254 scalar field and rendered in decimal.
"""
import hashlib

# Order of the BN254 scalar field used by the credential commitment
BN254_FIELD_MODULUS: int = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)

DERIVATION_FUNCTION: str = "sha256-bn254"
DERIVATION_INPUT_FIELDS: tuple[str, ...] = (
    "rawAttributes.registryNumber",
    "rawAttributes.license",
    "rawAttributes.credentialType",
)


def _length_prefixed(value: str) -> bytes:
    encoded = value.encode("utf-8")
    return len(encoded).to_bytes(4, "big") + encoded


def derive_hash(registry_number: str, license: str, credential_type: str) -> str:
    """Hash the three credential attributes into a decimal field element."""
    hasher = hashlib.sha256()
    for value in (registry_number, license, credential_type):
        hasher.update(_length_prefixed(value))
    digest = int.from_bytes(hasher.digest(), "big")
    return str(digest % BN254_FIELD_MODULUS)
