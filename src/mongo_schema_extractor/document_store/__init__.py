"""Document store access exports."""

from .in_memory_document_store import InMemoryDocumentStore
from .mongo_document_store import MongoDocumentStore, open_mongo_document_store
from .store_contracts import (
    DocumentStore,
    DocumentStoreError,
    FieldTypeGroup,
    StoreConnectionError,
    StoreQueryError,
)

__all__ = [
    "DocumentStore",
    "DocumentStoreError",
    "FieldTypeGroup",
    "InMemoryDocumentStore",
    "MongoDocumentStore",
    "StoreConnectionError",
    "StoreQueryError",
    "open_mongo_document_store",
]
