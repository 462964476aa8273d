"""Pytest fixtures for medical credential issuer tests."""
from typing import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from medcred.context import IssuerContext
from medcred.db.models import Base
from medcred.db.session import create_db_engine, create_session_factory
from medcred.main import create_app
from medcred.registry.npi import NPIRegistryClient
from medcred.verification.proof import ProofBindingValidator

from tests.fakes import (
    TEST_REGISTRY_URL,
    TEST_SECRET_KEY,
    FakeKeySource,
    FakeOracle,
    FakeRegistry,
    FakeSigner,
    FakeVerifier,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session_factory():
    """Session factory over an in-memory SQLite database."""
    engine = create_db_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    factory = create_session_factory(engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def verifier() -> FakeVerifier:
    return FakeVerifier()


@pytest.fixture
def key_source() -> FakeKeySource:
    return FakeKeySource()


@pytest.fixture
def signer() -> FakeSigner:
    return FakeSigner()


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def validator(oracle, verifier, key_source) -> ProofBindingValidator:
    return ProofBindingValidator(oracle=oracle, verifier=verifier, key_source=key_source)


@pytest.fixture
async def context(
    validator, registry, signer, session_factory
) -> AsyncGenerator[IssuerContext, None]:
    """Issuer context wired to fakes."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(registry))
    ctx = IssuerContext(
        validator=validator,
        registry=NPIRegistryClient(TEST_REGISTRY_URL, http_client),
        signer=signer,
        secret_key=TEST_SECRET_KEY,
        session_factory=session_factory,
        http_client=http_client,
    )
    yield ctx
    await ctx.close()


@pytest.fixture
async def client(context) -> AsyncGenerator[AsyncClient, None]:
    """API client over an app using the fake context."""
    app = create_app(context=context)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as async_client:
        yield async_client
