"""Verification endpoints.

POST /verification               submit a claim with its proof
GET  /verification/credentials   retrieve the signed credential, once
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from medcred.api.models import ErrorResponse, VerificationRequest, VerificationResponse
from medcred.workflow import VerificationWorkflow

log = logging.getLogger(__name__)
router = APIRouter(prefix="/verification", tags=["verification"])

SUBMIT_SUCCESS_MESSAGE = (
    "Verification request successful. "
    "You can retrieve your signed credentials using the provided ID."
)


def get_workflow(request: Request) -> VerificationWorkflow:
    """FastAPI dependency returning a workflow over the app's context."""
    return VerificationWorkflow(request.app.state.context)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


@router.post(
    "",
    response_model=VerificationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_verification(
    body: VerificationRequest,
    request: Request,
    workflow: VerificationWorkflow = Depends(get_workflow),
) -> VerificationResponse:
    """Verify a proof and registry record, and record the identity."""
    record_id = await workflow.submit(
        body.first_name,
        body.last_name,
        body.registry_number,
        body.proof,
        request_id=_request_id(request),
    )
    return VerificationResponse(message=SUBMIT_SUCCESS_MESSAGE, id=record_id)


@router.get(
    "/credentials",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_credentials(
    request: Request,
    id: Optional[str] = None,
    workflow: VerificationWorkflow = Depends(get_workflow),
) -> dict:
    """Sign and return the credential for a recorded identity."""
    return await workflow.retrieve(id, request_id=_request_id(request))
