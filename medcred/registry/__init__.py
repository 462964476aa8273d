"""Professional registry module.

This module provides:
- NPIRegistryClient: lookup and cross-check against the NPI registry
- check_registry_record: ordered validation of a registry response
- resolve_specialty: first-match specialty code resolution
"""

from medcred.registry.npi import (
    NPIRegistryClient,
    RegistryAttributes,
    check_registry_record,
    normalize_credential,
)
from medcred.registry.specialties import SPECIALTY_CODES, resolve_specialty

__all__ = [
    "NPIRegistryClient",
    "RegistryAttributes",
    "SPECIALTY_CODES",
    "check_registry_record",
    "normalize_credential",
    "resolve_specialty",
]
