"""Trading endpoints: swap transactions, quotes and the token catalog."""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from dexapi.api.dependencies import get_swap_facade, get_token_catalog
from dexapi.errors import DexApiError, ValidationError
from dexapi.models.token import TokenDescriptor, describe_errors
from dexapi.routing.catalog import TokenCatalog
from dexapi.routing.facade import SwapFacade

logger = structlog.get_logger()

router = APIRouter(tags=["trading"])

JsonBody = Annotated[dict[str, Any] | None, Body()]

SWAP_FIELDS = ("swapTo", "swapFrom", "amount", "address")
QUOTE_FIELDS = ("swapFrom", "swapTo", "userAmount")


def _missing(payload: dict[str, Any], fields: tuple[str, ...]) -> list[str]:
    return [name for name in fields if not payload.get(name)]


def _descriptor(field: str, data: Any) -> TokenDescriptor:
    try:
        return TokenDescriptor.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"{field}: {describe_errors(e)}") from e


def _failure(event: str, message: str, error: Exception, **context: Any) -> JSONResponse:
    """Log a trading failure and answer 400 with the error text."""
    if isinstance(error, DexApiError):
        logger.warning(event, error=str(error), error_type=type(error).__name__, **context)
    else:
        logger.exception(event, **context)
    return JSONResponse(status_code=400, content={"message": message, "error": str(error)})


@router.post("/swap")
async def create_swap(
    payload: JsonBody = None,
    facade: SwapFacade = Depends(get_swap_facade),
) -> Any:
    """Build an unsigned swap transaction for the caller to sign.

    Body: ``swapFrom`` / ``swapTo`` token descriptors, ``amount`` in whole
    units of ``swapFrom`` and the recipient ``address``.
    """
    payload = payload or {}
    if _missing(payload, SWAP_FIELDS):
        return JSONResponse(
            status_code=400,
            content={"message": "Missing required fields: swapTo, swapFrom, amount, address"},
        )

    try:
        swap_from = _descriptor("swapFrom", payload["swapFrom"])
        swap_to = _descriptor("swapTo", payload["swapTo"])
        tx = await facade.build_swap_transaction(
            swap_from, swap_to, payload["amount"], payload["address"]
        )
    except Exception as e:
        return _failure(
            "swap_failed", "Error creating swap transaction", e, recipient=payload.get("address")
        )

    return {
        "message": "Swap transaction created successfully",
        "transaction": tx.model_dump(exclude_none=True),
    }


@router.get("/tokens")
async def list_catalog_tokens(catalog: TokenCatalog = Depends(get_token_catalog)) -> Any:
    """Tokens of the supported chain from the external token list (best effort)."""
    try:
        tokens = await catalog.list_tokens()
    except Exception as e:
        logger.exception("token_catalog_error")
        return JSONResponse(status_code=500, content={"error": str(e)})
    return {"success": True, "count": len(tokens), "tokens": tokens}


@router.post("/quote")
async def quote(
    payload: JsonBody = None,
    facade: SwapFacade = Depends(get_swap_facade),
) -> Any:
    """Quote the output amount for selling ``userAmount`` of ``swapFrom``.

    The quote is a decimal string in whole units of ``swapTo``.
    """
    payload = payload or {}
    if _missing(payload, QUOTE_FIELDS):
        return JSONResponse(status_code=400, content={"message": "Missing required fields"})

    try:
        swap_from = _descriptor("swapFrom", payload["swapFrom"])
        swap_to = _descriptor("swapTo", payload["swapTo"])
        amount_out = await facade.quote(swap_from, swap_to, payload["userAmount"])
    except Exception as e:
        return _failure("quote_failed", "Error fetching quote for swap", e)

    return {"message": "Quote fetched successfully", "quote": amount_out.to_exact()}
