"""Clients for the external zero-knowledge proof verifier.

The proof system is opaque to this service. Verification is delegated to
a verifier sidecar that accepts the circuit's verification key and the
proof, and answers with a boolean.
"""

import asyncio
import logging
from typing import Any, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)


class ProofVerifier(Protocol):
    """verify(artifact, proof) -> bool"""

    async def verify(self, verification_key: Any, proof: dict) -> bool:
        ...


class VerificationKeySource:
    """Fetches the fixed verification key for the name circuit.

    The key is immutable per circuit version, so it is fetched on first
    use and kept for the life of the process.
    """

    def __init__(self, url: str, client: httpx.AsyncClient):
        self.url = url
        self._client = client
        self._key: Optional[Any] = None
        self._lock = asyncio.Lock()

    async def get(self) -> Any:
        """Return the verification key.

        Raises:
            httpx.HTTPError: The key could not be fetched
        """
        if self._key is not None:
            return self._key
        async with self._lock:
            if self._key is None:
                response = await self._client.get(self.url)
                response.raise_for_status()
                self._key = response.json()
                logger.info(f"Fetched verification key from {self.url}")
        return self._key


class RemoteProofVerifier:
    """Proof verifier sidecar reached over HTTP.

    POST {url} {"verificationKey": ..., "proof": ...} -> {"verified": bool}
    """

    def __init__(self, url: str, client: httpx.AsyncClient):
        self.url = url
        self._client = client

    async def verify(self, verification_key: Any, proof: dict) -> bool:
        response = await self._client.post(
            self.url,
            json={"verificationKey": verification_key, "proof": proof},
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict) or not isinstance(data.get("verified"), bool):
            raise ValueError("Verifier returned a malformed response")
        return data["verified"]
