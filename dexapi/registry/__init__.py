"""Custom token registry backed by MongoDB."""

from dexapi.registry.database import Database
from dexapi.registry.service import RegistryService
from dexapi.registry.store import TokenStore

__all__ = ["Database", "RegistryService", "TokenStore"]
