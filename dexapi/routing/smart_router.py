"""HTTP client for the smart-order-router collaborator.

Route discovery, on-chain quoting and calldata encoding live in an external
router service. This client only speaks its JSON contract:

    POST /pools/v2               -> {"pools": [...]}
    POST /pools/v3               -> {"pools": [...]}
    POST /trade                  -> {"trade": {...} | null}
    POST /swap-call-parameters   -> {"calldata": "0x..", "value": "0x.."}

Pools and trades are opaque JSON objects handed back to the service as-is.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from dexapi.errors import CollaboratorError, NoRouteError
from dexapi.routing.constants import (
    MAX_HOPS,
    MAX_SPLITS,
    QUOTER_OPTIMIZATION,
    TRADE_TYPE_EXACT_INPUT,
)
from dexapi.routing.currency import Currency, CurrencyAmount, Percent

logger = structlog.get_logger()

Pool = dict[str, Any]
Trade = dict[str, Any]


class SmartRouterClient:
    """Async client for the router service.

    Args:
        http_client: Shared ``httpx.AsyncClient`` (owns timeouts and pooling)
        base_url: Router service root, e.g. "http://localhost:8787"
        v2_subgraph_url: Subgraph the router reads V2 pools from
        v3_subgraph_url: Subgraph the router reads V3 pools from
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        v2_subgraph_url: str,
        v3_subgraph_url: str,
    ) -> None:
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")
        self.v2_subgraph_url = v2_subgraph_url
        self.v3_subgraph_url = v3_subgraph_url

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http_client.post(url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            detail = e.response.text[:200]
            logger.warning("router_call_rejected", path=path, status=e.response.status_code)
            raise CollaboratorError(
                f"Router {path} failed with status {e.response.status_code}: {detail}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("router_call_failed", path=path, error=str(e))
            raise CollaboratorError(f"Router {path} unreachable: {e}") from e
        except ValueError as e:
            raise CollaboratorError(f"Router {path} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise CollaboratorError(f"Router {path} returned an unexpected payload")
        return data

    async def get_v2_candidate_pools(self, currency_a: Currency, currency_b: Currency) -> list[Pool]:
        data = await self._post(
            "/pools/v2",
            {
                "currencyA": currency_a.to_json(),
                "currencyB": currency_b.to_json(),
                "v2SubgraphUrl": self.v2_subgraph_url,
                "v3SubgraphUrl": self.v3_subgraph_url,
            },
        )
        return list(data.get("pools") or [])

    async def get_v3_candidate_pools(self, currency_a: Currency, currency_b: Currency) -> list[Pool]:
        data = await self._post(
            "/pools/v3",
            {
                "currencyA": currency_a.to_json(),
                "currencyB": currency_b.to_json(),
                "subgraphUrl": self.v3_subgraph_url,
            },
        )
        return list(data.get("pools") or [])

    async def get_best_trade(
        self,
        amount: CurrencyAmount,
        currency_out: Currency,
        pools: list[Pool],
        gas_price_wei: int,
    ) -> Trade:
        """Ask the router for the best exact-input trade over ``pools``.

        Raises:
            NoRouteError: The router found no trade
            CollaboratorError: Transport or service failure
        """
        data = await self._post(
            "/trade",
            {
                "amount": amount.to_json(),
                "currencyOut": currency_out.to_json(),
                "tradeType": TRADE_TYPE_EXACT_INPUT,
                "gasPriceWei": str(gas_price_wei),
                "maxHops": MAX_HOPS,
                "maxSplits": MAX_SPLITS,
                "quoterOptimization": QUOTER_OPTIMIZATION,
                "pools": pools,
            },
        )
        trade = data.get("trade")
        if not trade:
            raise NoRouteError("No viable route found for this swap")
        return trade

    async def swap_call_parameters(
        self, trade: Trade, recipient: str, slippage_tolerance: Percent
    ) -> tuple[str, str]:
        """Encode ``trade`` into router calldata.

        Returns:
            (calldata, value) where value is the native amount as a hex string
        """
        data = await self._post(
            "/swap-call-parameters",
            {
                "trade": trade,
                "recipient": recipient,
                "slippageTolerance": slippage_tolerance.to_json(),
            },
        )
        calldata = data.get("calldata")
        value = data.get("value")
        if not isinstance(calldata, str) or not isinstance(value, str):
            raise CollaboratorError("Router returned incomplete swap call parameters")
        return calldata, value


def output_amount(trade: Trade, currency_out: Currency) -> CurrencyAmount:
    """Read the trade's output amount.

    The router reports ``outputAmount.quotient`` as a decimal string.
    """
    try:
        quotient = int(trade["outputAmount"]["quotient"])
    except (KeyError, TypeError, ValueError) as e:
        raise CollaboratorError("Router trade has no readable outputAmount") from e
    return CurrencyAmount.from_raw_amount(currency_out, quotient)
