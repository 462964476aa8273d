"""NPI registry client and cross-check.

Looks up a practitioner in the public NPI registry
(https://npiregistry.cms.hhs.gov/api/) and extracts the attributes placed
in the credential: license number, specialty code and credential type.

The registry returns loosely-typed JSON. Every nested field is checked
before use; a missing or malformed field fails the step that needs it with
a RegistryError, never a KeyError or TypeError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from medcred.config import NPI_REGISTRY_API_VERSION, SUPPORTED_CREDENTIAL_TYPES
from medcred.exceptions import RegistryError, RegistryFailure
from medcred.registry.specialties import SPECIALTY_CODES, resolve_specialty

logger = logging.getLogger(__name__)


@dataclass
class RegistryAttributes:
    """Attributes extracted from a matching registry record.

    Attributes:
        registry_number: The NPI number that was looked up.
        license: License number of the primary taxonomy.
        specialty_code: Code resolved from the primary taxonomy description.
        credential_type: Normalized credential, "MD" or "DO".
    """

    registry_number: str
    license: str
    specialty_code: int
    credential_type: str


def normalize_credential(credential: str) -> str:
    """'M.D.' -> 'MD'"""
    return credential.replace(".", "").strip().upper()


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _primary_taxonomy(result: dict) -> Optional[dict]:
    taxonomies = result.get("taxonomies")
    if not isinstance(taxonomies, list):
        return None
    for taxonomy in taxonomies:
        if isinstance(taxonomy, dict) and taxonomy.get("primary") is True:
            return taxonomy
    return None


def check_registry_record(
    data: Any,
    registry_number: str,
    first_name: str,
    last_name: str,
    specialty_table: tuple[tuple[str, int], ...] = SPECIALTY_CODES,
) -> RegistryAttributes:
    """Validate a registry response against the caller's claim.

    Steps run in order; the first failure is raised.

    Raises:
        RegistryError: With the reason of the first failing step
    """
    data = _as_dict(data)

    errors = data.get("Errors")
    if isinstance(errors, list) and len(errors) > 0:
        raise RegistryError(RegistryFailure.NOT_FOUND)

    results = data.get("results")
    if not isinstance(results, list):
        results = []
    result_count = data.get("result_count", len(results))
    if result_count == 0 or not results:
        raise RegistryError(RegistryFailure.NOT_FOUND)

    result = _as_dict(results[0])

    # The registry matches names by prefix, so an exact comparison is required
    basic = _as_dict(result.get("basic"))
    registry_first = basic.get("first_name")
    registry_last = basic.get("last_name")
    if (
        not isinstance(registry_first, str)
        or not isinstance(registry_last, str)
        or registry_first.casefold() != first_name.casefold()
        or registry_last.casefold() != last_name.casefold()
    ):
        raise RegistryError(RegistryFailure.NAME_MISMATCH)

    credential = basic.get("credential")
    credential_type = normalize_credential(credential) if isinstance(credential, str) else ""
    if credential_type not in SUPPORTED_CREDENTIAL_TYPES:
        raise RegistryError(RegistryFailure.UNSUPPORTED_CREDENTIAL_TYPE)

    taxonomy = _primary_taxonomy(result)
    license = taxonomy.get("license") if taxonomy else None
    if not isinstance(license, str) or not license:
        raise RegistryError(RegistryFailure.MISSING_LICENSE)

    description = taxonomy.get("desc")
    if not isinstance(description, str) or not description:
        raise RegistryError(RegistryFailure.MISSING_SPECIALTY)

    specialty_code = resolve_specialty(description, specialty_table)
    if specialty_code is None:
        raise RegistryError(RegistryFailure.UNSUPPORTED_SPECIALTY)

    return RegistryAttributes(
        registry_number=registry_number,
        license=license,
        specialty_code=specialty_code,
        credential_type=credential_type,
    )


class NPIRegistryClient:
    """Async client for the NPI registry API."""

    def __init__(self, base_url: str, client: httpx.AsyncClient):
        self.base_url = base_url
        self._client = client

    async def lookup(self, registry_number: str, first_name: str, last_name: str) -> Any:
        """Query the registry by number and name.

        Raises:
            httpx.HTTPError: Transport failure or non-2xx response
        """
        response = await self._client.get(
            self.base_url,
            params={
                "number": registry_number,
                "first_name": first_name,
                "last_name": last_name,
                "version": NPI_REGISTRY_API_VERSION,
            },
        )
        response.raise_for_status()
        return response.json()

    async def cross_check(
        self, registry_number: str, first_name: str, last_name: str
    ) -> RegistryAttributes:
        """Look up and validate a practitioner.

        Raises:
            RegistryError: The record does not support the claim
            httpx.HTTPError: The registry could not be reached
        """
        data = await self.lookup(registry_number, first_name, last_name)
        try:
            return check_registry_record(data, registry_number, first_name, last_name)
        except RegistryError as e:
            logger.info(f"Registry cross-check failed: {e.reason}")
            raise
