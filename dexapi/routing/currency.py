"""Currencies and amounts exchanged with the router collaborator.

A currency is either the chain's native asset or an ERC-20 contract token,
distinguished exactly like registry tokens (``isNative`` vs address).
Amounts are raw integers in the currency's smallest unit.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from dexapi.errors import ValidationError
from dexapi.models.token import TokenDescriptor

# Enough digits for any uint256 amount scaled by up to 77 decimals
DECIMAL_CONTEXT = decimal.Context(prec=160)

# chain id -> (symbol, name) of the native asset
NATIVE_ASSETS = {
    56: ("BNB", "BNB Chain Native Token"),
    97: ("tBNB", "BNB Chain Testnet Native Token"),
    1: ("ETH", "Ether"),
}


@dataclass(frozen=True)
class NativeCurrency:
    """The chain's gas asset (BNB on BSC). Has no contract address."""

    chain_id: int
    decimals: int = 18
    symbol: str = "BNB"
    name: str = "BNB Chain Native Token"

    is_native = True

    @classmethod
    def on_chain(cls, chain_id: int) -> NativeCurrency:
        symbol, name = NATIVE_ASSETS.get(chain_id, ("NATIVE", "Native Currency"))
        return cls(chain_id=chain_id, symbol=symbol, name=name)

    def to_json(self) -> dict[str, Any]:
        return {"isNative": True, "chainId": self.chain_id}


@dataclass(frozen=True)
class ERC20Token:
    """A contract token."""

    chain_id: int
    address: str
    decimals: int
    symbol: str | None = None
    name: str | None = None

    is_native = False

    def to_json(self) -> dict[str, Any]:
        return {
            "isToken": True,
            "chainId": self.chain_id,
            "address": self.address,
            "decimals": self.decimals,
            "symbol": self.symbol,
            "name": self.name,
        }


Currency = NativeCurrency | ERC20Token


def to_currency(descriptor: TokenDescriptor) -> Currency:
    """Convert a request token descriptor to a router currency."""
    if descriptor.is_native:
        return NativeCurrency.on_chain(descriptor.chain_id)
    if descriptor.address is None:
        raise ValidationError("address is required for non-native tokens")
    return ERC20Token(
        chain_id=descriptor.chain_id,
        address=descriptor.address,
        decimals=descriptor.decimals,
        symbol=descriptor.symbol,
        name=descriptor.name,
    )


def parse_units(value: str | int | float, decimals: int) -> int:
    """Convert a human decimal amount to raw smallest units.

    Fractional digits beyond ``decimals`` are rounded half-up.

    Args:
        value: Amount such as "1.5" (numbers are accepted too)
        decimals: Currency precision

    Returns:
        Raw integer amount

    Raises:
        ValidationError: If ``value`` is not a finite decimal number
    """
    if isinstance(value, bool) or not isinstance(value, str | int | float):
        raise ValidationError(f"Invalid amount: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except decimal.InvalidOperation as err:
        raise ValidationError(f"Invalid amount: '{value}'") from err
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: '{value}'")

    with decimal.localcontext(DECIMAL_CONTEXT):
        raw = amount.scaleb(decimals).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return int(raw)


@dataclass(frozen=True)
class CurrencyAmount:
    """A raw amount of a currency."""

    currency: Currency
    quotient: int

    @classmethod
    def from_raw_amount(cls, currency: Currency, raw_amount: int) -> CurrencyAmount:
        return cls(currency=currency, quotient=int(raw_amount))

    def to_exact(self) -> str:
        """Render the amount in whole units without exponent or trailing zeros.

        Example: 2_500_000_000_000_000_000 with 18 decimals -> "2.5"
        """
        with decimal.localcontext(DECIMAL_CONTEXT):
            exact = Decimal(self.quotient).scaleb(-self.currency.decimals)
            text = format(exact, "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text

    def to_json(self) -> dict[str, Any]:
        return {"currency": self.currency.to_json(), "quotient": str(self.quotient)}


@dataclass(frozen=True)
class Percent:
    """A fraction used for slippage tolerance."""

    numerator: int
    denominator: int = 100

    @classmethod
    def from_bps(cls, bps: int) -> Percent:
        return cls(numerator=bps, denominator=10_000)

    def to_json(self) -> dict[str, str]:
        return {"numerator": str(self.numerator), "denominator": str(self.denominator)}
