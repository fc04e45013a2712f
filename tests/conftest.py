"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import httpx
import mongomock
import pytest
from fastapi.testclient import TestClient
from mongomock.collection import Collection as MockCollection

from dexapi.api.dependencies import get_registry_service, get_swap_facade, get_token_catalog
from dexapi.api.main import app
from dexapi.registry.service import RegistryService
from dexapi.registry.store import TokenStore
from dexapi.routing.catalog import TokenCatalog
from dexapi.routing.facade import SwapFacade
from tests.helpers.mocks import (
    MockRouterService,
    StubEth,
    make_swap_facade,
    make_token_catalog,
    make_token_list,
)


# =============================================================================
# Pytest fixtures
# =============================================================================


@pytest.fixture
def mongo_collection() -> MockCollection:
    """An in-memory ``tokens`` collection."""
    return mongomock.MongoClient()["tradewallet"]["tokens"]


@pytest.fixture
def token_store(mongo_collection: MockCollection) -> TokenStore:
    store = TokenStore(lambda: mongo_collection)
    store.ensure_indexes()
    return store


@pytest.fixture
def registry_service(token_store: TokenStore) -> RegistryService:
    return RegistryService(token_store)


@pytest.fixture
def router_service() -> MockRouterService:
    return MockRouterService()


@pytest.fixture
def stub_eth() -> StubEth:
    return StubEth()


@pytest.fixture
def swap_facade(router_service: MockRouterService, stub_eth: StubEth) -> SwapFacade:
    return make_swap_facade(router_service, stub_eth)


@pytest.fixture
def token_catalog() -> TokenCatalog:
    return make_token_catalog(lambda request: httpx.Response(200, json=make_token_list()))


@pytest.fixture
def client(
    registry_service: RegistryService,
    swap_facade: SwapFacade,
    token_catalog: TokenCatalog,
) -> Iterator[TestClient]:
    """Test client with every service injected via dependency overrides."""
    app.dependency_overrides[get_registry_service] = lambda: registry_service
    app.dependency_overrides[get_swap_facade] = lambda: swap_facade
    app.dependency_overrides[get_token_catalog] = lambda: token_catalog
    yield TestClient(app)
    app.dependency_overrides.clear()
