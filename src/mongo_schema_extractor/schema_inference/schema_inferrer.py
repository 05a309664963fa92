"""Recursive schema inference service."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from bson import DBRef

from mongo_schema_extractor.configuration.runtime_settings import ExtractionSettings
from mongo_schema_extractor.document_store.store_contracts import DocumentStore, StoreQueryError
from mongo_schema_extractor.schema_management.schema_models import FieldSchema, FullSchema
from mongo_schema_extractor.type_sampling import (
    ARRAY_TAG,
    OBJECT_TAG,
    classify_value,
    is_composite,
)

from .inference_outcomes import CollectionFailure, InferenceLogger, InferenceOutcome

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Continue:
    """Expansion produced a subtree."""

    fields: tuple[FieldSchema, ...]


@dataclass(frozen=True)
class _Truncated:
    """Expansion stopped at the depth ceiling."""


_Expansion = _Continue | _Truncated | None


class SchemaInferrer:
    """Infers per-collection schema trees from a document store.

    Top-level keys are discovered with one grouping query per collection so
    their type sets are the union over every document. Nested keys are never
    unioned: each sampled sub-document contributes its own fields, and
    repeated names are left for the flattener to collapse.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: ExtractionSettings | None = None,
        logger: InferenceLogger | None = None,
    ) -> None:
        self._store = store
        self._settings = settings or ExtractionSettings()
        self._logger = logger or _LOGGER
        if self._settings.max_depth < 1:
            raise ValueError("max_depth must be at least 1.")
        self._truncated_count = 0

    def generate_schema_for_all_collections(self) -> FullSchema:
        """Return the schema of every collection in listing order."""
        return self.infer_all_collections().schema

    def infer_all_collections(self) -> InferenceOutcome:
        """Infer every collection, recording skipped ones when not failing fast."""
        collection_names = self._store.list_collection_names()
        self._logger.info(f"generating schema for {len(collection_names)} collections")
        schema: FullSchema = {}
        failures: list[CollectionFailure] = []
        for collection_name in collection_names:
            try:
                schema[collection_name] = self.get_schema(collection_name)
            except StoreQueryError as exc:
                if self._settings.fail_fast:
                    raise
                self._logger.error(f'collection "{collection_name}" skipped: {exc}')
                failures.append(CollectionFailure(collection_name=collection_name, message=str(exc)))
                continue
            if self._truncated_count:
                self._logger.info(
                    f'collection "{collection_name}": {self._truncated_count} fields '
                    f"truncated at depth {self._settings.max_depth}."
                )
            self._logger.info(f'collection "{collection_name}" generated.')
        return InferenceOutcome(schema=schema, failed_collections=tuple(failures))

    @property
    def truncated_field_count(self) -> int:
        """Number of nodes truncated by the most recent ``get_schema`` call."""
        return self._truncated_count

    def get_schema(self, collection_name: str, depth: int = 0) -> tuple[FieldSchema, ...]:
        """Discover the top-level fields of one collection and expand composite ones."""
        self._truncated_count = 0
        fields: list[FieldSchema] = []
        for group in self._store.field_type_groups(collection_name):
            types = _resolve_observed_types(group.types)
            expansion: _Expansion = None
            if OBJECT_TAG in types:
                expansion = self._descend(
                    depth,
                    lambda child_depth, name=group.name: self.get_schema_from_sub_documents(
                        collection_name, name, child_depth
                    ),
                )
            elif ARRAY_TAG in types:
                expansion = self._descend(
                    depth,
                    lambda child_depth, name=group.name: self._get_schema_from_array_instances(
                        collection_name, name, child_depth
                    ),
                )
            fields.append(_build_field(group.name, types, expansion))
        return tuple(fields)

    def get_schema_from_sub_documents(
        self, collection_name: str, field: str, depth: int
    ) -> tuple[FieldSchema, ...]:
        """Concatenate the fields of every object-typed value of ``field``."""
        fields: list[FieldSchema] = []
        for sub_document in self._store.sub_documents(collection_name, field, OBJECT_TAG):
            fields.extend(self.get_schema_from_array_documents([sub_document], depth))
        return tuple(fields)

    def get_schema_from_array_documents(
        self, documents: Iterable[Any], depth: int
    ) -> tuple[FieldSchema, ...]:
        """Derive fields from each document's own keys, recursing into composites."""
        fields: list[FieldSchema] = []
        for document in documents:
            for key, value in _document_items(document):
                tag = classify_value(value)
                fields.append(_build_field(key, (tag,), self._value_expansion(value, tag, depth)))
        return tuple(fields)

    def _get_schema_from_array_instances(
        self, collection_name: str, field: str, depth: int
    ) -> tuple[FieldSchema, ...] | None:
        fields: list[FieldSchema] = []
        expanded = False
        for instance in self._store.sub_documents(collection_name, field, ARRAY_TAG):
            if _has_composite_head(instance):
                expanded = True
                fields.extend(self.get_schema_from_array_documents(instance, depth))
        return tuple(fields) if expanded else None

    def _value_expansion(self, value: Any, tag: str, depth: int) -> _Expansion:
        if tag == ARRAY_TAG:
            if not _has_composite_head(value):
                return None
            return self._descend(
                depth, lambda child_depth: self.get_schema_from_array_documents(value, child_depth)
            )
        if tag == OBJECT_TAG:
            return self._descend(
                depth, lambda child_depth: self.get_schema_from_array_documents([value], child_depth)
            )
        return None

    def _descend(
        self,
        depth: int,
        derive: Callable[[int], tuple[FieldSchema, ...] | None],
    ) -> _Expansion:
        if depth + 1 > self._settings.max_depth:
            self._truncated_count += 1
            return _Truncated()
        sub_fields = derive(depth + 1)
        return None if sub_fields is None else _Continue(sub_fields)


def _resolve_observed_types(observed: Sequence[str]) -> tuple[str, ...]:
    if OBJECT_TAG in observed:
        return (OBJECT_TAG,)
    return tuple(sorted(set(observed)))


def _has_composite_head(value: Sequence[Any]) -> bool:
    return len(value) > 0 and is_composite(classify_value(value[0]))


def _document_items(document: Any) -> Iterable[tuple[str, Any]]:
    if isinstance(document, Mapping):
        return document.items()
    if isinstance(document, DBRef):
        return document.as_doc().items()
    if isinstance(document, (list, tuple)):
        # Positional keys follow MongoDB's dotted array-index notation.
        return ((str(index), item) for index, item in enumerate(document))
    return ()


def _build_field(name: str, types: tuple[str, ...], expansion: _Expansion) -> FieldSchema:
    if isinstance(expansion, _Truncated):
        return FieldSchema(name=name, types=types, truncated=True)
    if isinstance(expansion, _Continue):
        return FieldSchema(name=name, types=types, sub_fields=expansion.fields)
    return FieldSchema(name=name, types=types)
