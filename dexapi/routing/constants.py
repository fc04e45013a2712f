"""Routing constants.

Centralizes router addresses and the fixed trade policy.
"""

from dexapi.models.types import is_valid_address


def _validate_router_address(chain_id: int, address: str) -> str:
    if not is_valid_address(address):
        raise ValueError(f"Invalid router address for chain {chain_id}: {address}")
    return address


# PancakeSwap smart router deployments
SMART_ROUTER_ADDRESSES = {
    1: _validate_router_address(1, "0x13f4EA83D0bd40E75C8222255bc855a974568Dd4"),
    56: _validate_router_address(56, "0x13f4EA83D0bd40E75C8222255bc855a974568Dd4"),
    97: _validate_router_address(97, "0x9a489505a00cE272eAa5e07Dba6491314CaE3796"),
}

# Trade policy passed to the router for every quote and swap
TRADE_TYPE_EXACT_INPUT = "EXACT_INPUT"
MAX_HOPS = 2
MAX_SPLITS = 2
QUOTER_OPTIMIZATION = True
