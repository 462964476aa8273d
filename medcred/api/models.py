"""API models for the medical credential issuer.

Pydantic models for API requests and responses.
"""
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field


# =============================================================================
# Request Models
# =============================================================================


class VerificationRequest(BaseModel):
    """Request to verify a practitioner.

    Every field is optional at the schema level so that absent fields
    surface as ParameterError rather than a schema validation error.
    """

    first_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("firstName", "first_name")
    )
    last_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("lastName", "last_name")
    )
    registry_number: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("registryNumber", "npiNumber", "registry_number"),
        description="NPI number of the practitioner",
    )
    proof: Optional[dict[str, Any]] = Field(
        None, description="Proof with public inputs [root, issuer, firstName, lastName]"
    )


# =============================================================================
# Response Models
# =============================================================================


class VerificationResponse(BaseModel):
    """Response from a successful verification request."""

    message: str
    id: str = Field(..., description="Opaque id for retrieving the credential")


class ErrorResponse(BaseModel):
    """Error response."""

    error: bool = True
    code: str
    message: str


class HealthResponse(BaseModel):
    """Liveness response."""

    healthy: bool


class RoutesResponse(BaseModel):
    """Index of public routes."""

    routes: list[str]
