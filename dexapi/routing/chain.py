"""Chain RPC access for gas price and gas estimation."""

from __future__ import annotations

import structlog
from web3 import AsyncWeb3, Web3

from dexapi.errors import CollaboratorError
from dexapi.models.swap import SwapTransaction

logger = structlog.get_logger()


class ChainClient:
    """Thin wrapper over an ``AsyncWeb3`` HTTP connection.

    Args:
        rpc_url: JSON-RPC endpoint. Empty means "not configured"; calls then
                 fail with ``CollaboratorError``.
        w3: Pre-built ``AsyncWeb3`` (tests inject a stub)
    """

    def __init__(self, rpc_url: str = "", w3: AsyncWeb3 | None = None) -> None:
        self.rpc_url = rpc_url
        if w3 is None and rpc_url:
            w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self._w3 = w3

    def _require_w3(self) -> AsyncWeb3:
        if self._w3 is None:
            raise CollaboratorError("QUICKNODE_RPC_URL is not configured")
        return self._w3

    async def get_gas_price(self) -> int:
        """Current gas price in wei."""
        w3 = self._require_w3()
        try:
            return int(await w3.eth.gas_price)
        except Exception as e:
            logger.warning("gas_price_failed", error=str(e))
            raise CollaboratorError(f"Failed to fetch gas price: {e}") from e

    async def estimate_gas(self, tx: SwapTransaction) -> int:
        """Estimate the gas limit for an unsigned swap transaction."""
        w3 = self._require_w3()
        params = {
            "from": Web3.to_checksum_address(tx.account),
            "to": Web3.to_checksum_address(tx.to),
            "data": tx.data,
            "value": int(tx.value),
        }
        try:
            return int(await w3.eth.estimate_gas(params))
        except Exception as e:
            logger.warning("gas_estimate_failed", to=tx.to, error=str(e))
            raise CollaboratorError(f"Failed to estimate gas: {e}") from e
