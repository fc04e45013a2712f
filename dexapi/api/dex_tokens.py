"""Registry endpoints for the custom token list (``/dexTokens``).

Handlers are synchronous; FastAPI runs them in its threadpool so the
blocking MongoDB driver never stalls the event loop.
"""

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from dexapi.api.dependencies import get_registry_service
from dexapi.errors import (
    DuplicateTokenError,
    StorageError,
    TokenNotFoundError,
    ValidationError,
)
from dexapi.registry.service import RegistryService

logger = structlog.get_logger()

router = APIRouter(prefix="/dexTokens", tags=["registry"])

JsonBody = Annotated[dict[str, Any] | None, Body()]


def _storage_failure(message: str, error: StorageError) -> JSONResponse:
    logger.error("registry_storage_error", message=message, error=str(error))
    return JSONResponse(status_code=500, content={"message": message, "error": str(error)})


def _rejected(status_code: int, error: Exception) -> JSONResponse:
    logger.info("registry_request_rejected", status=status_code, reason=str(error))
    return JSONResponse(status_code=status_code, content={"message": str(error)})


@router.get("")
def list_tokens(service: RegistryService = Depends(get_registry_service)) -> Any:
    """Return every registered token."""
    try:
        tokens = service.list()
    except StorageError as e:
        return _storage_failure("Error fetching tokens", e)
    return {"message": "Tokens fetched successfully", "tokens": tokens}


@router.post("", status_code=201)
def add_token(
    payload: JsonBody = None,
    service: RegistryService = Depends(get_registry_service),
) -> Any:
    """Register a token; ``symbol`` must be unique."""
    try:
        token_id = service.create(payload or {})
    except (ValidationError, DuplicateTokenError) as e:
        return _rejected(400, e)
    except StorageError as e:
        return _storage_failure("Error adding token", e)
    return {"message": "Token added successfully", "_id": token_id}


@router.delete("")
def delete_token(
    payload: JsonBody = None,
    service: RegistryService = Depends(get_registry_service),
) -> Any:
    """Remove the token named by ``symbol`` in the body."""
    try:
        count = service.delete(payload or {})
    except ValidationError as e:
        return _rejected(400, e)
    except TokenNotFoundError as e:
        return _rejected(404, e)
    except StorageError as e:
        return _storage_failure("Error deleting token", e)
    return {"message": "Token deleted successfully", "count": count}


@router.patch("/{symbol}")
def update_token(
    symbol: str,
    payload: JsonBody = None,
    service: RegistryService = Depends(get_registry_service),
) -> Any:
    """Overwrite the supplied fields of the token with ``symbol``."""
    try:
        count = service.patch(symbol, payload or {})
    except (ValidationError, DuplicateTokenError) as e:
        return _rejected(400, e)
    except TokenNotFoundError as e:
        return _rejected(404, e)
    except StorageError as e:
        return _storage_failure("Error updating token", e)
    return {"message": "Token updated successfully", "count": count}
