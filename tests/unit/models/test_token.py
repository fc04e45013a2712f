"""Tests for token models."""

import pytest
from pydantic import ValidationError

from dexapi.models.token import TokenDescriptor, TokenRecord, describe_errors
from tests.helpers import CAKE, make_descriptor, make_native_descriptor


class TestTokenDescriptor:
    def test_contract_token(self):
        descriptor = TokenDescriptor.model_validate(make_descriptor(address=CAKE, symbol="CAKE"))

        assert descriptor.chain_id == 56
        assert descriptor.is_native is False
        assert descriptor.address == CAKE

    def test_native_ignores_address(self):
        data = make_native_descriptor()
        data["address"] = CAKE

        descriptor = TokenDescriptor.model_validate(data)
        assert descriptor.is_native is True
        assert descriptor.address is None

    def test_contract_token_requires_address(self):
        with pytest.raises(ValidationError, match="address is required"):
            TokenDescriptor.model_validate(make_descriptor(address=None))

    def test_invalid_address(self):
        with pytest.raises(ValidationError):
            TokenDescriptor.model_validate(make_descriptor(address="not-an-address"))

    def test_chain_id_string(self):
        data = make_descriptor()
        data["chainId"] = "56"
        assert TokenDescriptor.model_validate(data).chain_id == 56

    def test_boolean_decimals_rejected(self):
        data = make_descriptor()
        data["decimals"] = True
        with pytest.raises(ValidationError):
            TokenDescriptor.model_validate(data)


class TestTokenRecord:
    def base(self, **overrides) -> dict:
        data = {
            "chainId": 56,
            "decimals": 18,
            "symbol": "CAKE",
            "name": "PancakeSwap Token",
            "isNative": False,
            "isToken": True,
            "address": CAKE,
        }
        data.update(overrides)
        return data

    def test_document_uses_wire_names_and_drops_nulls(self):
        document = TokenRecord.model_validate(self.base()).to_document()

        assert document == {
            "chainId": 56,
            "decimals": 18,
            "symbol": "CAKE",
            "name": "PancakeSwap Token",
            "isNative": False,
            "isToken": True,
            "address": CAKE,
        }

    def test_flags_must_differ(self):
        with pytest.raises(ValidationError, match="exactly one"):
            TokenRecord.model_validate(self.base(isNative=True))
        with pytest.raises(ValidationError, match="exactly one"):
            TokenRecord.model_validate(self.base(isToken=False))

    def test_native_with_address_rejected(self):
        with pytest.raises(ValidationError, match="must not be set"):
            TokenRecord.model_validate(self.base(isNative=True, isToken=False))

    def test_extra_fields_round_trip(self):
        document = TokenRecord.model_validate(self.base(tags=["defi"])).to_document()
        assert document["tags"] == ["defi"]


def test_describe_errors_names_fields():
    with pytest.raises(ValidationError) as exc_info:
        TokenDescriptor.model_validate({"chainId": "x", "decimals": -1})

    message = describe_errors(exc_info.value)
    assert "chainId" in message
    assert "decimals" in message
