"""Pydantic models for gateway data structures."""

from dexapi.models.swap import SwapTransaction
from dexapi.models.token import TokenDescriptor, TokenRecord, describe_errors
from dexapi.models.types import Address, Bytes, is_valid_address

__all__ = [
    # Types
    "Address",
    "Bytes",
    "is_valid_address",
    # Token models
    "TokenDescriptor",
    "TokenRecord",
    "describe_errors",
    # Swap models
    "SwapTransaction",
]
