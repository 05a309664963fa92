"""Document store access contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


class DocumentStoreError(Exception):
    """Raised when the document store cannot serve a request."""


class StoreConnectionError(DocumentStoreError):
    """Raised when the store is unreachable or rejects the credentials."""


class StoreQueryError(DocumentStoreError):
    """Raised when a listing, aggregation or projection fails."""


@dataclass(frozen=True)
class FieldTypeGroup:
    """One distinct top-level key of a collection with its observed type tags."""

    name: str
    types: tuple[str, ...]


class DocumentStore(Protocol):
    """Capabilities the schema inferrer needs from a backing store.

    ``field_type_groups`` returns one group per distinct top-level key sorted
    by key name. ``sub_documents`` keeps the store's natural document order
    and returns only values whose own type is ``type_tag``; an array holding
    objects is not an ``object`` value.
    """

    def list_collection_names(self) -> list[str]: ...

    def field_type_groups(self, collection_name: str) -> list[FieldTypeGroup]: ...

    def sub_documents(self, collection_name: str, field: str, type_tag: str) -> list[Any]: ...
