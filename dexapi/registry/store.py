"""Token Store: MongoDB persistence for registry tokens.

Documents are keyed by ``symbol`` (unique). Driver failures surface as
``StorageError`` and values BSON cannot encode as ``ValidationError``; a
missing symbol on delete/patch is reported through the returned counts,
not an exception.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

import structlog
from bson.errors import InvalidDocument
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError, PyMongoError

from dexapi.errors import DuplicateTokenError, StorageError, ValidationError

logger = structlog.get_logger()

SYMBOL_INDEX = "symbol_unique"

# Resolves the collection on every call so an unconfigured database fails
# at first use instead of at startup
CollectionProvider = Callable[[], Collection]


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as e:
        logger.error("storage_operation_failed", operation=operation, error=str(e))
        raise StorageError(str(e)) from e
    except (OverflowError, InvalidDocument) as e:
        # Values BSON cannot encode, e.g. integers beyond 64 bits
        logger.info("storage_document_rejected", operation=operation, error=str(e))
        raise ValidationError(f"Invalid token document: {e}") from e


def _to_wire(document: Mapping[str, Any]) -> dict[str, Any]:
    """Copy a stored document with its ObjectId rendered as a string."""
    result = dict(document)
    if "_id" in result:
        result["_id"] = str(result["_id"])
    return result


class TokenStore:
    """Persistent symbol -> token document mapping.

    Args:
        collection: Callable returning the ``tokens`` collection, e.g.
            ``Database.tokens`` or ``lambda: mongomock_collection`` in tests.
    """

    def __init__(self, collection: CollectionProvider) -> None:
        self._collection = collection

    def ensure_indexes(self) -> None:
        """Create the unique index on ``symbol``."""
        with _storage_errors("ensure_indexes"):
            self._collection().create_index([("symbol", ASCENDING)], unique=True, name=SYMBOL_INDEX)

    def list_all(self) -> list[dict[str, Any]]:
        """Return every token in insertion order."""
        with _storage_errors("list_all"):
            cursor = self._collection().find({}).sort("_id", ASCENDING)
            return [_to_wire(doc) for doc in cursor]

    def find_by_symbol(self, symbol: str) -> dict[str, Any] | None:
        with _storage_errors("find_by_symbol"):
            document = self._collection().find_one({"symbol": symbol})
        return _to_wire(document) if document is not None else None

    def insert(self, document: Mapping[str, Any]) -> str:
        """Persist a new token document.

        Args:
            document: Validated token document (wire field names)

        Returns:
            The generated document id as a string

        Raises:
            DuplicateTokenError: If the symbol is already registered
            StorageError: If the write failed or was not acknowledged
            ValidationError: If a value cannot be stored
        """
        symbol = document["symbol"]
        if self.find_by_symbol(symbol) is not None:
            raise DuplicateTokenError(symbol)

        try:
            with _storage_errors("insert"):
                result = self._collection().insert_one(dict(document))
        except StorageError as e:
            # Lost a race with a concurrent insert of the same symbol
            if isinstance(e.__cause__, DuplicateKeyError):
                raise DuplicateTokenError(symbol) from e.__cause__
            raise

        if not result.acknowledged:
            raise StorageError("Error adding token to the database")
        return str(result.inserted_id)

    def delete_by_symbol(self, symbol: str) -> int:
        """Remove the token with ``symbol``.

        Returns:
            Number of removed documents (0 or 1)
        """
        with _storage_errors("delete_by_symbol"):
            result = self._collection().delete_one({"symbol": symbol})
        return result.deleted_count

    def patch_by_symbol(self, symbol: str, fields: Mapping[str, Any]) -> tuple[int, int]:
        """Overwrite only the supplied fields of the token with ``symbol``.

        Fields whose value is ``None`` are removed from the document.

        Returns:
            (matched_count, modified_count)

        Raises:
            DuplicateTokenError: If the patch renames onto a taken symbol
            ValidationError: If a value cannot be stored
        """
        update: dict[str, dict[str, Any]] = {}
        to_set = {key: value for key, value in fields.items() if value is not None}
        to_unset = {key: "" for key, value in fields.items() if value is None}
        if to_set:
            update["$set"] = to_set
        if to_unset:
            update["$unset"] = to_unset

        try:
            with _storage_errors("patch_by_symbol"):
                result = self._collection().update_one({"symbol": symbol}, update)
        except StorageError as e:
            if isinstance(e.__cause__, DuplicateKeyError):
                raise DuplicateTokenError(str(fields.get("symbol", symbol))) from e.__cause__
            raise
        return result.matched_count, result.modified_count
