"""Credential signing and response assembly.

Signing is delegated to an external issuance primitive:

    issue(secret_key, specialty_code, derived_hash) -> signed payload

The secret key is process configuration. It is sent only to the signer
and never logged or returned.
"""
from typing import Any, Protocol

import httpx

from medcred.config import LEAF_FIELD_ORDER
from medcred.credentials.derive import DERIVATION_FUNCTION, DERIVATION_INPUT_FIELDS
from medcred.db.models import IdentityRecord


class CredentialSigner(Protocol):
    """issue(secret_key, specialty_code, derived_hash) -> signed payload"""

    async def issue(self, secret_key: str, specialty_code: int, derived_hash: str) -> dict:
        ...


class RemoteCredentialSigner:
    """Signer sidecar reached over HTTP.

    POST {url} {"privateKey": ..., "field1": ..., "field2": ...} -> signed payload
    """

    def __init__(self, url: str, client: httpx.AsyncClient):
        self.url = url
        self._client = client

    async def issue(self, secret_key: str, specialty_code: int, derived_hash: str) -> dict:
        response = await self._client.post(
            self.url,
            json={
                "privateKey": secret_key,
                "field1": str(specialty_code),
                "field2": derived_hash,
            },
        )
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError("Signer returned a non-object payload")
        return payload


def build_credential_metadata(record: IdentityRecord, derived_hash: str) -> dict[str, Any]:
    """Metadata describing how the signed leaf was built."""
    return {
        "rawAttributes": {
            "registryNumber": record.registry_number,
            "specialtyCode": record.specialty_code,
            "license": record.license,
            "credentialType": record.credential_type,
        },
        "derivedAttribute": {
            "value": derived_hash,
            "derivationFunction": DERIVATION_FUNCTION,
            "inputFields": list(DERIVATION_INPUT_FIELDS),
        },
        "leafFieldOrder": list(LEAF_FIELD_ORDER),
    }


def build_credential_response(signed_payload: dict, metadata: dict[str, Any]) -> dict[str, Any]:
    """Signed payload with metadata attached."""
    response = dict(signed_payload)
    response["metadata"] = metadata
    return response
