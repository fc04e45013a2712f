"""Pydantic models for registry tokens and swap token descriptors.

Wire field names follow the token-list convention (``chainId``, ``isNative``,
``logoURI``); Python attributes are snake_case with aliases.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from dexapi.models.types import Address, ChainId, Decimals, PriceString


class TokenDescriptor(BaseModel):
    """A token as described in a swap or quote request body.

    Native assets carry no address; any address sent with ``isNative`` is
    ignored. Contract tokens must carry one.
    """

    chain_id: ChainId = Field(alias="chainId")
    decimals: Decimals
    symbol: str | None = None
    name: str | None = None
    is_native: bool = Field(default=False, alias="isNative")
    address: Address | None = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_address(self) -> TokenDescriptor:
        if self.is_native:
            self.address = None
        elif self.address is None:
            raise ValueError("address is required for non-native tokens")
        return self


class TokenRecord(BaseModel):
    """A token stored in the registry.

    Invariants:
        - exactly one of ``is_native`` / ``is_token`` is true
        - ``address`` is set if and only if ``is_token`` is true

    Extra fields are kept so admin patches can attach arbitrary metadata.
    """

    chain_id: ChainId = Field(alias="chainId")
    decimals: Decimals
    symbol: str = Field(min_length=1)
    name: str = Field(min_length=1)
    is_native: bool = Field(alias="isNative")
    is_token: bool = Field(alias="isToken")
    address: Address | None = None
    logo_uri: str | None = Field(default=None, alias="logoURI")
    usdt_price: PriceString | None = Field(default=None, alias="usdtPrice")

    model_config = {"populate_by_name": True, "extra": "allow"}

    @model_validator(mode="after")
    def _check_kind(self) -> TokenRecord:
        if self.is_native == self.is_token:
            raise ValueError("exactly one of isNative and isToken must be true")
        if self.is_token and self.address is None:
            raise ValueError("address is required when isToken is true")
        if self.is_native and self.address is not None:
            raise ValueError("address must not be set when isNative is true")
        return self

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape (wire names, no nulls)."""
        return self.model_dump(by_alias=True, exclude_none=True)


def describe_errors(err: PydanticValidationError) -> str:
    """Flatten a pydantic error into one readable line."""
    parts = []
    for error in err.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"]
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)
