"""Swap and quote routing through the external smart-order-router."""

from dexapi.routing.catalog import TokenCatalog
from dexapi.routing.chain import ChainClient
from dexapi.routing.currency import CurrencyAmount, ERC20Token, NativeCurrency, Percent
from dexapi.routing.facade import SwapFacade
from dexapi.routing.smart_router import SmartRouterClient

__all__ = [
    "ChainClient",
    "CurrencyAmount",
    "ERC20Token",
    "NativeCurrency",
    "Percent",
    "SmartRouterClient",
    "SwapFacade",
    "TokenCatalog",
]
