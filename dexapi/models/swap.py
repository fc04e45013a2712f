"""Pydantic models for swap transactions returned to the caller."""

from pydantic import BaseModel, Field

from dexapi.models.types import Address, Bytes


class SwapTransaction(BaseModel):
    """An unsigned transaction ready for the caller to sign.

    On-chain integers are decimal strings so they survive JSON clients
    without 53-bit precision loss.
    """

    account: Address = Field(description="Sender and swap recipient")
    to: Address = Field(description="Smart router contract address")
    data: Bytes = Field(description="Encoded router call")
    value: str = Field(description="Native value in wei, decimal string")
    gas: str | None = Field(default=None, description="Estimated gas limit, if requested")
