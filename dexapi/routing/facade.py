"""Swap/Quote façade over the router collaborator.

Stateless: each call converts the request tokens to router currencies,
gathers V2 and V3 candidate pools concurrently, asks the router for the
best exact-input trade and, for swaps, for the encoded router call.
"""

from __future__ import annotations

import asyncio

import structlog
from pydantic import ValidationError as PydanticValidationError

from dexapi.errors import CollaboratorError, ValidationError
from dexapi.models.swap import SwapTransaction
from dexapi.models.token import TokenDescriptor
from dexapi.models.types import is_valid_address
from dexapi.routing.chain import ChainClient
from dexapi.routing.constants import SMART_ROUTER_ADDRESSES
from dexapi.routing.currency import (
    Currency,
    CurrencyAmount,
    Percent,
    parse_units,
    to_currency,
)
from dexapi.routing.smart_router import SmartRouterClient, Trade, output_amount

logger = structlog.get_logger()


class SwapFacade:
    """Quotes and unsigned swap transactions for one chain.

    Args:
        router: Router collaborator client
        chain: RPC client for gas price / gas estimates
        chain_id: The only chain requests may target
        slippage_tolerance: Tolerance encoded into swap calldata
        estimate_gas: Attach ``gas`` to built transactions
    """

    def __init__(
        self,
        router: SmartRouterClient,
        chain: ChainClient,
        chain_id: int,
        slippage_tolerance: Percent,
        estimate_gas: bool = False,
    ) -> None:
        if chain_id not in SMART_ROUTER_ADDRESSES:
            raise ValueError(f"No smart router deployment for chain {chain_id}")
        self.router = router
        self.chain = chain
        self.chain_id = chain_id
        self.slippage_tolerance = slippage_tolerance
        self.estimate_gas = estimate_gas

    @property
    def router_address(self) -> str:
        return SMART_ROUTER_ADDRESSES[self.chain_id]

    def _to_currency(self, descriptor: TokenDescriptor) -> Currency:
        if descriptor.chain_id != self.chain_id:
            raise ValidationError(
                f"Unsupported chainId {descriptor.chain_id}; only {self.chain_id} is supported"
            )
        return to_currency(descriptor)

    async def _best_trade(
        self, currency_in: Currency, currency_out: Currency, user_amount: str
    ) -> Trade:
        raw_amount = parse_units(user_amount, currency_in.decimals)
        if raw_amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        amount = CurrencyAmount.from_raw_amount(currency_in, raw_amount)

        # Join: any failure fails the whole request
        v2_pools, v3_pools, gas_price = await asyncio.gather(
            self.router.get_v2_candidate_pools(currency_in, currency_out),
            self.router.get_v3_candidate_pools(currency_in, currency_out),
            self.chain.get_gas_price(),
        )
        logger.debug(
            "candidate_pools_fetched",
            v2_pools=len(v2_pools),
            v3_pools=len(v3_pools),
            gas_price=gas_price,
        )
        return await self.router.get_best_trade(
            amount, currency_out, [*v2_pools, *v3_pools], gas_price
        )

    async def quote(
        self, swap_from: TokenDescriptor, swap_to: TokenDescriptor, user_amount: str
    ) -> CurrencyAmount:
        """Best-trade output amount for selling ``user_amount`` of ``swap_from``."""
        currency_in = self._to_currency(swap_from)
        currency_out = self._to_currency(swap_to)
        trade = await self._best_trade(currency_in, currency_out, user_amount)
        return output_amount(trade, currency_out)

    async def build_swap_transaction(
        self,
        swap_from: TokenDescriptor,
        swap_to: TokenDescriptor,
        user_amount: str,
        recipient: str,
    ) -> SwapTransaction:
        """Build an unsigned router transaction that swaps for ``recipient``.

        Raises:
            ValidationError: Bad recipient, amount or chain
            CollaboratorError: Router or RPC failure, or no route
        """
        if not is_valid_address(recipient):
            raise ValidationError(f"Invalid recipient address: {recipient}")
        currency_in = self._to_currency(swap_from)
        currency_out = self._to_currency(swap_to)

        trade = await self._best_trade(currency_in, currency_out, user_amount)
        calldata, value_hex = await self.router.swap_call_parameters(
            trade, recipient, self.slippage_tolerance
        )
        try:
            value = int(value_hex, 16)
        except ValueError as e:
            raise CollaboratorError(f"Router returned a non-hex value: {value_hex}") from e

        try:
            tx = SwapTransaction(
                account=recipient,
                to=self.router_address,
                data=calldata,
                value=str(value),
            )
        except PydanticValidationError as e:
            raise CollaboratorError("Router returned malformed calldata") from e
        if self.estimate_gas:
            tx.gas = str(await self.chain.estimate_gas(tx))

        logger.info(
            "swap_transaction_built",
            recipient=recipient,
            native_in=currency_in.is_native,
            native_out=currency_out.is_native,
            value=tx.value,
            gas=tx.gas,
        )
        return tx
