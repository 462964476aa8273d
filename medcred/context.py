"""Process-wide handles to external dependencies.

Built once at startup and passed to the workflow explicitly, so tests can
substitute fakes for the chain, the verifier, the registry and the signer.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx
from sqlalchemy.orm import sessionmaker

from medcred import config
from medcred.credentials.signer import CredentialSigner, RemoteCredentialSigner
from medcred.registry.npi import NPIRegistryClient
from medcred.verification.oracle import RootsOracle
from medcred.verification.proof import ProofBindingValidator
from medcred.verification.zk import RemoteProofVerifier, VerificationKeySource

log = logging.getLogger(__name__)


@dataclass
class IssuerContext:
    """Dependencies of the verification workflow."""

    validator: ProofBindingValidator
    registry: NPIRegistryClient
    signer: CredentialSigner
    secret_key: str = field(repr=False)
    session_factory: sessionmaker
    http_client: Optional[httpx.AsyncClient] = None

    async def close(self) -> None:
        """Release shared clients."""
        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
            log.info("Issuer context closed")


def build_context(session_factory: sessionmaker) -> IssuerContext:
    """Build the production context from configuration.

    Raises:
        RuntimeError: Required configuration is missing
    """
    ok, message = config.validate_config()
    if not ok:
        raise RuntimeError(message)

    http_client = httpx.AsyncClient(timeout=config.HTTP_TIMEOUT_SECONDS)
    validator = ProofBindingValidator(
        oracle=RootsOracle.from_rpc_url(config.RPC_URL, config.ROOTS_CONTRACT_ADDRESS),
        verifier=RemoteProofVerifier(config.PROOF_VERIFIER_URL, http_client),
        key_source=VerificationKeySource(config.VERIFICATION_KEY_URL, http_client),
    )
    log.info(f"Issuer context built for network {config.CHAIN_NETWORK}")
    return IssuerContext(
        validator=validator,
        registry=NPIRegistryClient(config.NPI_REGISTRY_URL, http_client),
        signer=RemoteCredentialSigner(config.SIGNER_URL, http_client),
        secret_key=config.ISSUER_SECRET_KEY,
        session_factory=session_factory,
        http_client=http_client,
    )
