"""Medical credential issuer FastAPI application."""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medcred.api import health, verification
from medcred.config import ISSUER_SECRET_KEY
from medcred.context import IssuerContext, build_context
from medcred.exceptions import IssuerError, ParameterError
from medcred.logging_config import configure_logging

configure_logging(secrets=[ISSUER_SECRET_KEY])
log = logging.getLogger("medcred-issuer")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build external handles on startup unless a context was injected."""
    log.info("Starting medical credential issuer...")
    owned: Optional[IssuerContext] = None

    if app.state.context is None:
        try:
            from medcred.db.session import SessionLocal, init_database
            init_database()
            owned = build_context(SessionLocal)
            app.state.context = owned
        except Exception as e:
            log.error(f"Failed to initialize issuer: {e}")
            raise

    log.info("Medical credential issuer started")
    yield

    log.info("Shutting down medical credential issuer...")
    if owned is not None:
        await owned.close()
        app.state.context = None
    log.info("Medical credential issuer stopped")


def _error_response(exc: IssuerError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": True, "code": exc.code, "message": exc.reason},
    )


def create_app(context: Optional[IssuerContext] = None) -> FastAPI:
    """Create the application.

    Args:
        context: Pre-built dependencies. When None, the lifespan handler
            builds them from configuration.
    """
    app = FastAPI(
        title="Medical Credential Issuer",
        version="0.1.0",
        description="Issues pseudonymous medical license credentials",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def req_log(request: Request, call_next):
        start = time.time()
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        remote = request.client.host if request.client else "-"
        response = await call_next(request)
        duration_ms = int((time.time() - start) * 1000)
        log.info(
            f"request_complete status={response.status_code} duration_ms={duration_ms}",
            extra={
                "request_id": request_id,
                "route": request.url.path,
                "method": request.method,
                "status": response.status_code,
                "remote_addr": remote,
                "duration_ms": duration_ms,
            },
        )
        return response

    @app.exception_handler(IssuerError)
    async def issuer_error_handler(request: Request, exc: IssuerError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        log.info(
            f"Malformed request body: {len(exc.errors())} error(s)",
            extra={"request_id": getattr(request.state, "request_id", "-")},
        )
        return _error_response(ParameterError("MalformedParameters"))

    app.include_router(health.router)
    app.include_router(verification.router)
    return app


app = create_app()
