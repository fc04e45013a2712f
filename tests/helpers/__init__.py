"""Test helpers module for shared test utilities.

- constants: Token addresses on BNB Smart Chain
- factories: Request payload factory functions
"""

from tests.helpers.constants import BSC, CAKE, RECIPIENT, SMART_ROUTER, USDT, WBNB
from tests.helpers.factories import (
    make_descriptor,
    make_native_descriptor,
    make_native_payload,
    make_token_payload,
)

__all__ = [
    # Constants
    "BSC",
    "CAKE",
    "USDT",
    "WBNB",
    "RECIPIENT",
    "SMART_ROUTER",
    # Factories
    "make_token_payload",
    "make_native_payload",
    "make_descriptor",
    "make_native_descriptor",
]
