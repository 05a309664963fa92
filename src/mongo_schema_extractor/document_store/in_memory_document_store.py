"""Scan-based document store over in-process collections."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from mongo_schema_extractor.type_sampling import classify_value

from .store_contracts import FieldTypeGroup, StoreQueryError


class InMemoryDocumentStore:
    """Document store computing the top-level group-by as one pass per collection.

    Field groups come out sorted by key name, the order the MongoDB store
    produces, while each group keeps its first-seen type order.
    """

    def __init__(self, collections: Mapping[str, Iterable[Mapping[str, Any]]]) -> None:
        self._collections = {name: list(documents) for name, documents in collections.items()}

    def list_collection_names(self) -> list[str]:
        return list(self._collections)

    def field_type_groups(self, collection_name: str) -> list[FieldTypeGroup]:
        observed: dict[str, dict[str, None]] = {}
        for document in self._documents(collection_name):
            for key, value in document.items():
                observed.setdefault(key, {})[classify_value(value)] = None
        return [
            FieldTypeGroup(name=key, types=tuple(types)) for key, types in sorted(observed.items())
        ]

    def sub_documents(self, collection_name: str, field: str, type_tag: str) -> list[Any]:
        return [
            document[field]
            for document in self._documents(collection_name)
            if field in document and classify_value(document[field]) == type_tag
        ]

    def _documents(self, collection_name: str) -> list[Mapping[str, Any]]:
        try:
            return self._collections[collection_name]
        except KeyError as exc:
            raise StoreQueryError(f"Unknown collection: {collection_name}") from exc
