"""Credential derivation and signing module."""

from medcred.credentials.derive import derive_hash
from medcred.credentials.signer import (
    CredentialSigner,
    RemoteCredentialSigner,
    build_credential_metadata,
    build_credential_response,
)

__all__ = [
    "CredentialSigner",
    "RemoteCredentialSigner",
    "build_credential_metadata",
    "build_credential_response",
    "derive_hash",
]
