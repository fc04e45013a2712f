"""Shared type definitions for gateway models."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field


def coerce_int(value: Any) -> Any:
    """Parse integral strings such as ``"56"`` into ints.

    Other values pass through unchanged so pydantic reports the type error.
    Booleans are rejected explicitly because ``bool`` is an ``int`` subclass.
    """
    if isinstance(value, bool):
        raise ValueError("Expected an integer, got a boolean")
    if isinstance(value, str):
        stripped = value.strip()
        try:
            return int(stripped)
        except ValueError as err:
            raise ValueError(f"Expected an integer string: '{value}'") from err
    return value


def coerce_decimal_string(value: Any) -> Any:
    """Accept numeric prices and store them as strings."""
    if isinstance(value, bool):
        raise ValueError("Expected a number or numeric string, got a boolean")
    if isinstance(value, int | float):
        return str(value)
    return value


# EVM address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# Arbitrary hex bytes
Bytes = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]*$")]

# Stored as a BSON int64
ChainId = Annotated[int, BeforeValidator(coerce_int), Field(gt=0, lt=2**63)]

# Token precision; 77 is the largest that still fits a uint256 unit
Decimals = Annotated[int, BeforeValidator(coerce_int), Field(ge=0, le=77)]

PriceString = Annotated[str, BeforeValidator(coerce_decimal_string)]


def is_valid_address(address: str) -> bool:
    """Check if a string is a valid EVM address.

    Args:
        address: String to validate

    Returns:
        True if valid 0x-prefixed, 40 hex char address
    """
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False
