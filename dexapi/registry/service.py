"""Registry Service: request validation in front of the Token Store.

Validation happens here, before any storage call. The service raises
gateway errors; endpoints turn them into HTTP responses.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from dexapi.errors import DuplicateTokenError, TokenNotFoundError, ValidationError
from dexapi.models.token import TokenRecord, describe_errors
from dexapi.registry.store import TokenStore

logger = structlog.get_logger()

REQUIRED_CREATE_FIELDS = ("chainId", "decimals", "symbol", "name")

# Fields a patch may never touch
IMMUTABLE_FIELDS = frozenset({"_id"})


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _check_symbol(value: Any) -> str:
    """Reject non-string symbols before they reach a query filter."""
    if not isinstance(value, str):
        raise ValidationError("symbol must be a string")
    return value


def _as_flag(name: str, value: Any) -> bool:
    """Interpret a JSON flag; absent means false."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    raise ValidationError(f"{name} must be a boolean")


class RegistryService:
    """Create, list, patch and delete registry tokens.

    Args:
        store: Token persistence
        require_usdt_price: Reject creates without ``usdtPrice``
    """

    def __init__(self, store: TokenStore, require_usdt_price: bool = True) -> None:
        self.store = store
        self.require_usdt_price = require_usdt_price

    def list(self) -> list[dict[str, Any]]:
        return self.store.list_all()

    def create(self, payload: Mapping[str, Any]) -> str:
        """Register a new token.

        Args:
            payload: Request body (chainId, decimals, symbol, name, usdtPrice,
                     isNative?, address?, logoURI?)

        Returns:
            Generated document id

        Raises:
            ValidationError: Missing or malformed fields
            DuplicateTokenError: Symbol already registered
            StorageError: Store failure
        """
        is_native = _as_flag("isNative", payload.get("isNative"))
        address = payload.get("address")
        logo_uri = payload.get("logoURI")
        usdt_price = payload.get("usdtPrice")

        required = list(REQUIRED_CREATE_FIELDS)
        if self.require_usdt_price:
            required.append("usdtPrice")
        missing = [name for name in required if _is_missing(payload.get(name))]
        if not is_native and _is_missing(address):
            missing.append("address")
        if missing:
            logger.info("token_create_rejected", reason="missing_fields", fields=missing)
            raise ValidationError("Missing required fields")

        try:
            record = TokenRecord(
                chainId=payload["chainId"],
                decimals=payload["decimals"],
                symbol=payload["symbol"],
                name=payload["name"],
                isNative=is_native,
                isToken=not is_native,
                address=None if is_native else address,
                logoURI=None if _is_missing(logo_uri) else logo_uri,
                usdtPrice=None if _is_missing(usdt_price) else usdt_price,
            )
        except PydanticValidationError as e:
            raise ValidationError(describe_errors(e)) from e

        token_id = self.store.insert(record.to_document())
        logger.info("token_added", symbol=record.symbol, token_id=token_id, native=is_native)
        return token_id

    def delete(self, payload: Mapping[str, Any]) -> int:
        """Remove the token named by ``payload["symbol"]``.

        Returns:
            Number of removed tokens (always 1 on success)

        Raises:
            ValidationError: No symbol given, or not a string
            TokenNotFoundError: Nothing matched
        """
        symbol = payload.get("symbol")
        if _is_missing(symbol):
            raise ValidationError("Missing required field: symbol")
        symbol = _check_symbol(symbol)

        count = self.store.delete_by_symbol(symbol)
        if count == 0:
            raise TokenNotFoundError(symbol)
        logger.info("token_deleted", symbol=symbol)
        return count

    def patch(self, symbol: str, fields: Mapping[str, Any]) -> int:
        """Overwrite the supplied fields of an existing token.

        The merged token must still satisfy the registry invariants
        (native/token flags, address presence, numeric chainId/decimals).
        Only the supplied fields are written; integral strings for
        ``chainId``/``decimals`` are stored as ints.

        Returns:
            Number of modified tokens (0 when the values were unchanged)

        Raises:
            ValidationError: Empty patch, immutable or invalid field name, non-string
                symbol, or broken invariant
            TokenNotFoundError: No token with ``symbol``
            DuplicateTokenError: Renaming onto an existing symbol
        """
        if _is_missing(symbol) or not fields:
            raise ValidationError("Missing required fields")
        forbidden = IMMUTABLE_FIELDS.intersection(fields)
        if forbidden:
            raise ValidationError(f"Cannot modify fields: {', '.join(sorted(forbidden))}")
        # Operator and dotted keys would rewrite the update document
        bad_keys = [
            key for key in fields if not isinstance(key, str) or key.startswith("$") or "." in key
        ]
        if bad_keys:
            raise ValidationError(f"Invalid field names: {', '.join(map(str, bad_keys))}")

        current = self.store.find_by_symbol(symbol)
        if current is None:
            raise TokenNotFoundError(symbol)

        new_symbol = _check_symbol(fields.get("symbol", symbol))
        if new_symbol != symbol and self.store.find_by_symbol(new_symbol) is not None:
            raise DuplicateTokenError(new_symbol)

        merged = {key: value for key, value in current.items() if key != "_id"}
        merged.update(fields)
        try:
            record = TokenRecord.model_validate(merged)
        except PydanticValidationError as e:
            raise ValidationError(describe_errors(e)) from e

        normalized = record.to_document()
        update = {key: normalized.get(key, value) for key, value in fields.items()}

        matched, modified = self.store.patch_by_symbol(symbol, update)
        if matched == 0:
            raise TokenNotFoundError(symbol)
        logger.info("token_updated", symbol=symbol, fields=sorted(fields), modified=modified)
        return modified
