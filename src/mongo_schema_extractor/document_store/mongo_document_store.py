"""MongoDB-backed document store service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Protocol, TypeVar

from pymongo import MongoClient
from pymongo.errors import ConfigurationError as MongoConfigurationError
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from mongo_schema_extractor.configuration.runtime_settings import MongoSettings
from mongo_schema_extractor.type_sampling import store_type_tag

from .store_contracts import FieldTypeGroup, StoreConnectionError, StoreQueryError

_LOGGER = logging.getLogger(__name__)

_USER_COLLECTIONS_FILTER = {"name": {"$regex": r"^(?!system\.)"}}

_T = TypeVar("_T")


class _MongoDatabase(Protocol):
    """Subset of ``pymongo.database.Database`` used by the store."""

    name: str

    def list_collection_names(self, **kwargs: Any) -> list[str]: ...

    def __getitem__(self, name: str) -> Any: ...


class MongoDocumentStore:
    """Document store answering inferrer queries with aggregation pipelines."""

    def __init__(self, database: _MongoDatabase) -> None:
        self._database = database

    def list_collection_names(self) -> list[str]:
        """Return user collection names in server listing order."""
        return self._run(
            f"list collections of '{self._database.name}'",
            lambda: list(self._database.list_collection_names(filter=_USER_COLLECTIONS_FILTER)),
        )

    def field_type_groups(self, collection_name: str) -> list[FieldTypeGroup]:
        """Group every top-level key of the collection with its distinct value types."""
        pipeline = [
            {"$project": {"flat": {"$objectToArray": "$$ROOT"}}},
            {"$unwind": "$flat"},
            {"$group": {"_id": "$flat.k", "types": {"$addToSet": {"$type": "$flat.v"}}}},
            {"$sort": {"_id": 1}},
        ]
        rows = self._aggregate(collection_name, pipeline)
        return [
            FieldTypeGroup(
                name=row["_id"],
                types=tuple(dict.fromkeys(store_type_tag(label) for label in row["types"])),
            )
            for row in rows
        ]

    def sub_documents(self, collection_name: str, field: str, type_tag: str) -> list[Any]:
        """Return every value of ``field`` whose BSON type is ``type_tag``.

        The type is compared with the aggregation ``$type`` operator; the query
        form of ``$type`` would also match arrays holding such an element.
        """
        pipeline = [
            {"$project": {"_id": 0, "subDoc": _field_expression(field)}},
            {"$match": {"$expr": {"$eq": [{"$type": "$subDoc"}, type_tag]}}},
        ]
        return [row["subDoc"] for row in self._aggregate(collection_name, pipeline)]

    def _aggregate(self, collection_name: str, pipeline: list[dict[str, Any]]) -> list[Mapping]:
        collection = self._database[collection_name]
        return self._run(
            f"aggregate collection '{collection_name}'",
            lambda: list(collection.aggregate(pipeline)),
        )

    @staticmethod
    def _run(action: str, call: Callable[[], _T]) -> _T:
        try:
            return call()
        except ConnectionFailure as exc:
            raise StoreConnectionError(f"Lost connection while trying to {action}: {exc}") from exc
        except PyMongoError as exc:
            raise StoreQueryError(f"Failed to {action}: {exc}") from exc


def _field_expression(field: str) -> Any:
    # Dotted or $-prefixed names cannot be addressed with a "$field" path.
    if "." in field or field.startswith("$"):
        return {"$getField": {"field": {"$literal": field}, "input": "$$ROOT"}}
    return f"${field}"


@contextmanager
def open_mongo_document_store(
    settings: MongoSettings,
    *,
    client_factory: Callable[..., Any] = MongoClient,
) -> Iterator[MongoDocumentStore]:
    """Connect to the configured database and close the client on exit.

    Raises:
      StoreConnectionError: If the server cannot be reached or rejects the
        credentials.
    """
    try:
        client = client_factory(
            settings.uri,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
            socketTimeoutMS=settings.socket_timeout_ms or None,
        )
    except MongoConfigurationError as exc:
        raise StoreConnectionError(f"Invalid MongoDB connection settings: {exc}") from exc

    try:
        try:
            client.admin.command("ping")
        except (ConnectionFailure, OperationFailure) as exc:
            raise StoreConnectionError(f"Cannot connect to MongoDB: {exc}") from exc
        _LOGGER.info("connected.")
        yield MongoDocumentStore(client[settings.database])
    finally:
        client.close()
