"""Health and index endpoints."""
import os

from fastapi import APIRouter

from medcred.api.models import HealthResponse, RoutesResponse

router = APIRouter(tags=["health"])

PUBLIC_ROUTES = [
    "POST /verification",
    "GET /verification/credentials",
    "GET /health",
]


@router.get("/", response_model=RoutesResponse)
def index() -> RoutesResponse:
    """List the public routes."""
    return RoutesResponse(routes=PUBLIC_ROUTES)


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    """Liveness only; does not touch dependencies."""
    return HealthResponse(healthy=True)


@router.get("/version")
def version():
    # GIT_SHA is injected at deploy time
    return {"git_sha": os.getenv("GIT_SHA", "unknown")}
