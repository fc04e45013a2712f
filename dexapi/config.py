"""Runtime configuration for the gateway.

All settings come from environment variables with sensible defaults.
Missing connection strings do not fail startup; the feature that needs
them fails on first use instead.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

# BNB Smart Chain
BSC_CHAIN_ID = 56

DEFAULT_V2_SUBGRAPH_URL = "https://proxy-worker-api.pancakeswap.com/bsc-exchange"
DEFAULT_V3_SUBGRAPH_URL = "https://api.thegraph.com/subgraphs/name/pancakeswap/exchange-v3-bsc"
DEFAULT_TOKEN_LIST_URLS = ("https://tokens.pancakeswap.finance/pancakeswap-top-100.json",)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name)
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Gateway settings.

    Attributes:
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        debug: Enable reload mode and human-readable console logs
        log_level: Minimum log level (DEBUG, INFO, WARNING, ...)
        rpc_url: Chain RPC endpoint used for gas price and gas estimation
        mongodb_uri: MongoDB connection string for the token registry
        mongodb_database: Database holding the ``tokens`` collection
        mongodb_timeout_ms: Server selection timeout for MongoDB operations
        smart_router_url: Base URL of the smart-order-router service
        v2_subgraph_url: Subgraph the router reads V2 candidate pools from
        v3_subgraph_url: Subgraph the router reads V3 candidate pools from
        token_list_urls: Token-list documents served by GET /tokens
        http_timeout_seconds: Timeout for every outbound HTTP call
        slippage_bps: Slippage tolerance for swap calldata, in basis points
        estimate_gas: Attach an RPC gas estimate to built swap transactions
        require_usdt_price: Require ``usdtPrice`` when registering a token
        chain_id: The single chain this gateway routes on
    """

    host: str = "0.0.0.0"
    port: int = 3001
    debug: bool = False
    log_level: str = "INFO"

    rpc_url: str = ""
    mongodb_uri: str = ""
    mongodb_database: str = "tradewallet"
    mongodb_timeout_ms: int = 5000

    smart_router_url: str = "http://localhost:8787"
    v2_subgraph_url: str = DEFAULT_V2_SUBGRAPH_URL
    v3_subgraph_url: str = DEFAULT_V3_SUBGRAPH_URL
    token_list_urls: tuple[str, ...] = field(default=DEFAULT_TOKEN_LIST_URLS)
    http_timeout_seconds: float = 30.0

    slippage_bps: int = 100
    estimate_gas: bool = False
    require_usdt_price: bool = True
    chain_id: int = BSC_CHAIN_ID

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the process environment."""
        return cls(
            host=os.environ.get("DEXAPI_HOST", "0.0.0.0"),
            port=int(os.environ.get("DEXAPI_PORT", "3001")),
            debug=_env_bool("DEXAPI_DEBUG", "false"),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            rpc_url=os.environ.get("QUICKNODE_RPC_URL", ""),
            mongodb_uri=os.environ.get("MONGODB_URI", ""),
            mongodb_database=os.environ.get("MONGODB_DATABASE", "tradewallet"),
            mongodb_timeout_ms=int(os.environ.get("MONGODB_TIMEOUT_MS", "5000")),
            smart_router_url=os.environ.get("SMART_ROUTER_URL", "http://localhost:8787"),
            v2_subgraph_url=os.environ.get("V2_SUBGRAPH_URL", DEFAULT_V2_SUBGRAPH_URL),
            v3_subgraph_url=os.environ.get("V3_SUBGRAPH_URL", DEFAULT_V3_SUBGRAPH_URL),
            token_list_urls=_env_list("TOKEN_LIST_URLS", DEFAULT_TOKEN_LIST_URLS),
            http_timeout_seconds=float(os.environ.get("HTTP_TIMEOUT_SECONDS", "30")),
            slippage_bps=int(os.environ.get("SWAP_SLIPPAGE_BPS", "100")),
            estimate_gas=_env_bool("ESTIMATE_GAS", "false"),
            require_usdt_price=_env_bool("REQUIRE_USDT_PRICE", "true"),
        )
