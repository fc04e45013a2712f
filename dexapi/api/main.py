"""FastAPI application for the DEX gateway.

Services are built once in the lifespan and shared through ``app.state``.
Missing MongoDB or RPC configuration does not stop startup; the endpoints
that need them fail when called.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dexapi import __version__
from dexapi.api import dex_tokens, endpoints
from dexapi.config import Settings
from dexapi.errors import StorageError
from dexapi.logging_config import configure_logging
from dexapi.registry.database import Database
from dexapi.registry.service import RegistryService
from dexapi.registry.store import TokenStore
from dexapi.routing.catalog import TokenCatalog
from dexapi.routing.chain import ChainClient
from dexapi.routing.currency import Percent
from dexapi.routing.facade import SwapFacade
from dexapi.routing.smart_router import SmartRouterClient

logger = structlog.get_logger()

settings = Settings.from_env()

# Maximum request body size (1 MiB)
MAX_REQUEST_SIZE = 1024 * 1024


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the registry and routing services, and tear them down on exit."""
    configure_logging(settings.log_level, console=settings.debug)

    database = Database.from_settings(settings)
    await asyncio.to_thread(database.connect)
    store = TokenStore(database.tokens)
    if database.is_configured:
        try:
            await asyncio.to_thread(store.ensure_indexes)
        except StorageError as e:
            logger.warning("symbol_index_unavailable", error=str(e))

    http_client = httpx.AsyncClient(timeout=settings.http_timeout_seconds)
    smart_router = SmartRouterClient(
        http_client,
        settings.smart_router_url,
        v2_subgraph_url=settings.v2_subgraph_url,
        v3_subgraph_url=settings.v3_subgraph_url,
    )

    app.state.registry_service = RegistryService(
        store, require_usdt_price=settings.require_usdt_price
    )
    app.state.swap_facade = SwapFacade(
        smart_router,
        ChainClient(settings.rpc_url),
        chain_id=settings.chain_id,
        slippage_tolerance=Percent.from_bps(settings.slippage_bps),
        estimate_gas=settings.estimate_gas,
    )
    app.state.token_catalog = TokenCatalog(
        http_client, settings.token_list_urls, chain_id=settings.chain_id
    )

    logger.info(
        "gateway_started",
        chain_id=settings.chain_id,
        registry_configured=database.is_configured,
        rpc_configured=bool(settings.rpc_url),
        estimate_gas=settings.estimate_gas,
    )
    try:
        yield
    finally:
        await http_client.aclose()
        database.close()
        logger.info("gateway_stopped")


app = FastAPI(
    title="DEX Gateway",
    description="Swap quotes, unsigned swap transactions and a custom token registry",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"message": "Request too large"})
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed bodies with 400, like every other input error."""
    logger.info("invalid_request_body", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request body", "error": str(exc.errors())},
    )


app.include_router(endpoints.router)
app.include_router(dex_tokens.router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def run() -> None:
    """Run the gateway API server.

    Configuration via environment variables:
    - DEXAPI_HOST: Host to bind to (default: 0.0.0.0)
    - DEXAPI_PORT: Port to bind to (default: 3001)
    - DEXAPI_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "dexapi.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
