"""Tests for the MongoDB handle."""

import mongomock
import pytest

from dexapi.errors import StorageError
from dexapi.registry.database import TOKENS_COLLECTION, Database


class TestDatabase:
    def test_unconfigured_connect_is_not_fatal(self):
        database = Database()

        assert database.connect() is False
        assert database.is_configured is False

    def test_unconfigured_tokens_raises(self):
        with pytest.raises(StorageError, match="MONGODB_URI is not configured"):
            Database().tokens()

    def test_tokens_collection(self):
        database = Database(database_name="registry", client=mongomock.MongoClient())

        collection = database.tokens()

        assert database.is_configured
        assert collection.name == TOKENS_COLLECTION
        assert collection.database.name == "registry"

    def test_close_forgets_client(self):
        database = Database(client=mongomock.MongoClient())
        database.close()

        assert database.is_configured is False
        with pytest.raises(StorageError):
            database.tokens()
