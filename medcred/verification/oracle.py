"""Root recency oracle backed by the on-chain Roots contract.

The Roots contract keeps a bounded window of recently published Merkle
roots. A proof anchored to a root outside that window is stale.

[USAGE]
    oracle = RootsOracle.from_rpc_url(RPC_URL, ROOTS_CONTRACT_ADDRESS)
    if await oracle.root_is_recent(proof_inputs[0]):
        ...
"""

import logging
from typing import Any

from web3 import AsyncHTTPProvider, AsyncWeb3, Web3

from medcred.exceptions import OracleUnavailable
from medcred.verification.fields import to_field_int

logger = logging.getLogger(__name__)


ROOTS_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"internalType": "uint256", "name": "root", "type": "uint256"}],
        "name": "rootIsRecent",
        "outputs": [{"internalType": "bool", "name": "", "type": "bool"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class RootsOracle:
    """Read-only view over the Roots contract.

    Fails closed: any provider or call error raises OracleUnavailable.
    """

    def __init__(self, contract: Any):
        self._contract = contract

    @classmethod
    def from_rpc_url(cls, rpc_url: str, address: str) -> "RootsOracle":
        w3 = AsyncWeb3(AsyncHTTPProvider(rpc_url))
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=ROOTS_ABI,
        )
        logger.info(f"Roots oracle bound to contract {address}")
        return cls(contract)

    async def root_is_recent(self, root: Any) -> bool:
        """Ask the contract whether root is among the recent roots.

        Raises:
            OracleUnavailable: The contract could not be queried
        """
        try:
            recent = await self._contract.functions.rootIsRecent(to_field_int(root)).call()
        except Exception as e:
            logger.warning(f"rootIsRecent call failed: {type(e).__name__}: {e}")
            raise OracleUnavailable(detail=str(e)) from e
        return bool(recent)
