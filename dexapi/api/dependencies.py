"""Dependency providers for API endpoints.

Services are built once in the application lifespan and kept on
``app.state``. Override these in tests to inject fakes:
    app.dependency_overrides[get_registry_service] = lambda: service
"""

from fastapi import Request

from dexapi.registry.service import RegistryService
from dexapi.routing.catalog import TokenCatalog
from dexapi.routing.facade import SwapFacade


def get_registry_service(request: Request) -> RegistryService:
    return request.app.state.registry_service


def get_swap_facade(request: Request) -> SwapFacade:
    return request.app.state.swap_facade


def get_token_catalog(request: Request) -> TokenCatalog:
    return request.app.state.token_catalog
