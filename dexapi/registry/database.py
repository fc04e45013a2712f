"""MongoDB handle for the token registry.

The handle is built once at process bootstrap and passed to the store.
``MongoClient`` connects lazily and reconnects on its own, so a failed
startup ping only gets logged; operations fail later with ``StorageError``.
"""

from __future__ import annotations

import structlog
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from dexapi.config import Settings
from dexapi.errors import StorageError

logger = structlog.get_logger()

TOKENS_COLLECTION = "tokens"


class Database:
    """Owns the MongoDB client and hands out collection handles.

    Args:
        uri: MongoDB connection string. Empty means "not configured".
        database_name: Database holding the registry collections
        timeout_ms: Server selection timeout; bounds how long a request
                    waits for an unreachable server
        client: Pre-built client (tests inject an in-memory one)
    """

    def __init__(
        self,
        uri: str = "",
        database_name: str = "tradewallet",
        timeout_ms: int = 5000,
        client: MongoClient | None = None,
    ) -> None:
        self.uri = uri
        self.database_name = database_name
        self.timeout_ms = timeout_ms
        self._client = client
        self._unavailable_reason = "MONGODB_URI is not configured"

    @classmethod
    def from_settings(cls, settings: Settings) -> Database:
        return cls(
            uri=settings.mongodb_uri,
            database_name=settings.mongodb_database,
            timeout_ms=settings.mongodb_timeout_ms,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    def connect(self) -> bool:
        """Create the client (if needed) and ping the deployment.

        Returns:
            True if the ping succeeded. False leaves the gateway running;
            registry calls report the storage failure when they happen.
        """
        if self._client is None:
            if not self.uri:
                logger.warning("mongodb_not_configured", message="Registry endpoints will fail")
                return False
            try:
                self._client = MongoClient(
                    self.uri,
                    server_api=ServerApi("1", strict=True, deprecation_errors=False),
                    serverSelectionTimeoutMS=self.timeout_ms,
                )
            except PyMongoError as e:
                self._unavailable_reason = f"Invalid MongoDB configuration: {e}"
                logger.error("mongodb_client_error", error=str(e))
                return False

        try:
            self._client[self.database_name].command("ping")
        except PyMongoError as e:
            logger.warning("mongodb_ping_failed", database=self.database_name, error=str(e))
            return False

        logger.info("mongodb_connected", database=self.database_name)
        return True

    def tokens(self) -> Collection:
        """Return the ``tokens`` collection handle.

        Raises:
            StorageError: If no client could be created
        """
        if self._client is None:
            raise StorageError(self._unavailable_reason)
        return self._client[self.database_name][TOKENS_COLLECTION]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
