"""Integration tests for the gateway API.

Registry calls run against an in-memory MongoDB; swap and quote calls run
against the mock router service and a stub chain.
"""

import pytest
from fastapi.testclient import TestClient

from dexapi.api import main
from dexapi.config import Settings
from tests.helpers import (
    CAKE,
    RECIPIENT,
    SMART_ROUTER,
    make_descriptor,
    make_native_descriptor,
    make_native_payload,
    make_token_payload,
)
from tests.helpers.mocks import MockRouterService


class TestRegistryLifecycle:
    """POST / GET / PATCH / DELETE against /dexTokens."""

    def test_add_then_list(self, client):
        response = client.post("/dexTokens", json=make_token_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Token added successfully"
        assert isinstance(body["_id"], str) and body["_id"]

        listed = client.get("/dexTokens").json()
        assert listed["message"] == "Tokens fetched successfully"
        [token] = listed["tokens"]
        assert token["_id"] == body["_id"]
        assert token["symbol"] == "CAKE"
        assert token["address"] == CAKE
        assert token["isToken"] is True
        assert token["isNative"] is False
        assert token["chainId"] == 56

    def test_duplicate_symbol_rejected(self, client):
        assert client.post("/dexTokens", json=make_token_payload()).status_code == 201

        response = client.post("/dexTokens", json=make_token_payload(name="Other"))

        assert response.status_code == 400
        assert "already exists" in response.json()["message"]
        assert len(client.get("/dexTokens").json()["tokens"]) == 1

    def test_native_token_without_address(self, client):
        response = client.post("/dexTokens", json=make_native_payload())

        assert response.status_code == 201
        [token] = client.get("/dexTokens").json()["tokens"]
        assert token["isNative"] is True
        assert token["isToken"] is False
        assert "address" not in token

    def test_contract_token_requires_address(self, client):
        response = client.post("/dexTokens", json=make_token_payload(address=None))

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required fields"}
        assert client.get("/dexTokens").json()["tokens"] == []

    def test_delete(self, client):
        client.post("/dexTokens", json=make_token_payload())

        response = client.request("DELETE", "/dexTokens", json={"symbol": "CAKE"})
        assert response.status_code == 200
        assert response.json() == {"message": "Token deleted successfully", "count": 1}

        again = client.request("DELETE", "/dexTokens", json={"symbol": "CAKE"})
        assert again.status_code == 404

    def test_delete_requires_symbol(self, client):
        response = client.request("DELETE", "/dexTokens", json={})

        assert response.status_code == 400

    def test_delete_with_operator_document_deletes_nothing(self, client):
        client.post("/dexTokens", json=make_token_payload())
        client.post("/dexTokens", json=make_native_payload())

        response = client.request("DELETE", "/dexTokens", json={"symbol": {"$ne": "nothing"}})

        assert response.status_code == 400
        assert response.json() == {"message": "symbol must be a string"}
        symbols = [t["symbol"] for t in client.get("/dexTokens").json()["tokens"]]
        assert symbols == ["CAKE", "BNB"]

    def test_chain_id_beyond_int64_is_bad_input(self, client):
        response = client.post("/dexTokens", json=make_token_payload(chain_id=2**70))

        assert response.status_code == 400
        assert "chainId" in response.json()["message"]

    def test_patch_overwrites_only_supplied_fields(self, client):
        client.post("/dexTokens", json=make_token_payload())

        response = client.patch(
            "/dexTokens/CAKE", json={"logoURI": "https://tokens.test/cake.png"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Token updated successfully", "count": 1}
        [token] = client.get("/dexTokens").json()["tokens"]
        assert token["logoURI"] == "https://tokens.test/cake.png"
        assert token["name"] == "PancakeSwap Token"
        assert token["usdtPrice"] == "2.50"

    def test_patch_unknown_symbol(self, client):
        response = client.patch("/dexTokens/NOPE", json={"name": "x"})

        assert response.status_code == 404

    def test_patch_empty_body(self, client):
        client.post("/dexTokens", json=make_token_payload())

        response = client.patch("/dexTokens/CAKE", json={})

        assert response.status_code == 400

    def test_patch_rename_onto_existing_symbol(self, client):
        client.post("/dexTokens", json=make_token_payload())
        client.post("/dexTokens", json=make_native_payload())

        response = client.patch("/dexTokens/CAKE", json={"symbol": "BNB"})

        assert response.status_code == 400
        assert "already exists" in response.json()["message"]


class TestQuoteEndpoint:
    def test_quote(self, client, router_service: MockRouterService):
        response = client.post(
            "/quote",
            json={
                "swapFrom": make_native_descriptor(),
                "swapTo": make_descriptor(address=CAKE, symbol="CAKE"),
                "userAmount": "1",
            },
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Quote fetched successfully", "quote": "2.5"}
        assert "/trade" in router_service.paths

    def test_missing_amount_never_reaches_router(self, client, router_service: MockRouterService):
        response = client.post(
            "/quote", json={"swapFrom": make_native_descriptor(), "swapTo": make_descriptor()}
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Missing required fields"}
        assert router_service.calls == []

    def test_unsupported_chain(self, client, router_service: MockRouterService):
        response = client.post(
            "/quote",
            json={
                "swapFrom": make_native_descriptor(),
                "swapTo": make_descriptor(chain_id=1),
                "userAmount": "1",
            },
        )

        assert response.status_code == 400
        assert "Unsupported chainId" in response.json()["error"]
        assert router_service.calls == []


class TestSwapEndpoint:
    def test_swap(self, client, router_service: MockRouterService):
        response = client.post(
            "/swap",
            json={
                "swapFrom": make_descriptor(),
                "swapTo": make_native_descriptor(),
                "amount": "10",
                "address": RECIPIENT,
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Swap transaction created successfully"
        tx = body["transaction"]
        assert tx["account"] == RECIPIENT
        assert tx["to"] == SMART_ROUTER
        assert tx["data"].startswith("0xac9650d8")
        assert tx["value"] == "0"
        assert "gas" not in tx
        assert router_service.paths[-1] == "/swap-call-parameters"

    def test_swap_missing_fields(self, client, router_service: MockRouterService):
        response = client.post(
            "/swap", json={"swapFrom": make_descriptor(), "swapTo": make_native_descriptor()}
        )

        assert response.status_code == 400
        assert response.json() == {
            "message": "Missing required fields: swapTo, swapFrom, amount, address"
        }
        assert router_service.calls == []


class TestCatalogEndpoint:
    def test_lists_supported_chain_tokens(self, client):
        response = client.get("/tokens")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["count"] == 2
        assert {t["symbol"] for t in body["tokens"]} == {"CAKE", "USDT"}


class TestStartupWithoutConfiguration:
    """The gateway starts without MongoDB or RPC; only their endpoints fail."""

    @pytest.fixture
    def bare_client(self, monkeypatch):
        monkeypatch.setattr(main, "settings", Settings())
        with TestClient(main.app) as client:
            yield client

    def test_health(self, bare_client):
        assert bare_client.get("/health").json() == {"status": "ok"}

    def test_registry_reports_storage_failure(self, bare_client):
        response = bare_client.get("/dexTokens")

        assert response.status_code == 500
        assert response.json()["message"] == "Error fetching tokens"

    def test_registry_validation_still_answers(self, bare_client):
        response = bare_client.post("/dexTokens", json={})

        assert response.status_code == 400
