"""Exception hierarchy for the medical credential issuer.

Every failure surfaced to a caller is an IssuerError carrying:
- code: the error family (class name), e.g. "ProofError"
- reason: a stable machine-readable string, e.g. "StaleRoot"

The HTTP layer renders both and nothing else; internal detail stays in logs.
"""
from enum import Enum
from typing import Optional


class ProofFailure(str, Enum):
    """Reasons a proof fails to bind to the caller's claim."""
    STALE_ROOT = "StaleRoot"
    INVALID = "Invalid"
    VERIFIER_UNAVAILABLE = "VerifierUnavailable"
    ISSUER_MISMATCH = "IssuerMismatch"
    NAME_MISMATCH_FIRST = "NameMismatch:first"
    NAME_MISMATCH_LAST = "NameMismatch:last"
    ORACLE_UNAVAILABLE = "OracleUnavailable"


class RegistryFailure(str, Enum):
    """Reasons a registry record fails the cross-check."""
    NOT_FOUND = "NotFound"
    NAME_MISMATCH = "NameMismatch"
    UNSUPPORTED_CREDENTIAL_TYPE = "UnsupportedCredentialType"
    MISSING_LICENSE = "MissingLicense"
    MISSING_SPECIALTY = "MissingSpecialty"
    UNSUPPORTED_SPECIALTY = "UnsupportedSpecialty"


class ConflictReason(str, Enum):
    """Reasons the identity ledger refuses a write."""
    DUPLICATE_IDENTITY = "DuplicateIdentity"
    ALREADY_RETRIEVED = "AlreadyRetrieved"


class IssuerError(Exception):
    """Base exception for all issuer errors."""

    status_code: int = 400
    default_reason: str = "Error"

    def __init__(self, reason: Optional[str] = None, detail: Optional[str] = None):
        if isinstance(reason, Enum):
            reason = reason.value
        self.reason: str = reason or self.default_reason
        self.detail = detail
        super().__init__(detail or self.reason)

    @property
    def code(self) -> str:
        """Error family reported to callers."""
        for cls in type(self).__mro__:
            if cls.__base__ is IssuerError:
                return cls.__name__
        return type(self).__name__


class ParameterError(IssuerError):
    """A required request parameter is absent or malformed."""

    default_reason = "MissingParameters"


class ProofError(IssuerError):
    """The submitted proof does not verify or does not bind to the claim."""

    default_reason = ProofFailure.INVALID.value


class OracleUnavailable(ProofError):
    """The root recency oracle could not be queried.

    Raised instead of answering, so an unreachable chain never counts
    as a recent root.
    """

    default_reason = ProofFailure.ORACLE_UNAVAILABLE.value

    def __init__(self, detail: Optional[str] = None):
        super().__init__(ProofFailure.ORACLE_UNAVAILABLE, detail)


class RegistryError(IssuerError):
    """The professional registry does not support the claim."""

    default_reason = RegistryFailure.NOT_FOUND.value


class IdentityConflict(IssuerError):
    """The ledger already holds state that forbids the operation."""

    default_reason = ConflictReason.DUPLICATE_IDENTITY.value


class NotFoundError(IssuerError):
    """No identity record exists for the supplied id."""

    default_reason = "NotFound"


class InternalError(IssuerError):
    """An external dependency failed unexpectedly."""

    status_code = 500
    default_reason = "InternalError"
