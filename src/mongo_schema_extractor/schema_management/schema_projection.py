"""Schema flattening and JSON document projection service."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .schema_models import FieldSchema, FlattenSchema, FullSchema

DEFAULT_FILTERED_FIELDS: tuple[str, ...] = (".buffer", "__v")


class SchemaError(Exception):
    """Raised for schema parsing or projection failures."""


def flatten_schema(
    schema: FullSchema, filtered_fields: Iterable[str] = DEFAULT_FILTERED_FIELDS
) -> FlattenSchema:
    """Return the dotted-path view of every collection in traversal order."""
    filters = tuple(filtered_fields)
    flattened: FlattenSchema = {}
    for collection_name, fields in schema.items():
        entries: dict[str, str] = {}
        _flatten_fields(fields, prefix="", filters=filters, entries=entries)
        flattened[collection_name] = entries
    return flattened


def _flatten_fields(
    fields: Sequence[FieldSchema],
    *,
    prefix: str,
    filters: tuple[str, ...],
    entries: dict[str, str],
) -> None:
    for field in fields:
        path = field.name if not prefix else f"{prefix}.{field.name}"
        if not _is_filtered(path, filters):
            # Repeated names from sampled sub-documents overwrite in place.
            entries[path] = ",".join(field.types)
        if field.sub_fields:
            _flatten_fields(field.sub_fields, prefix=path, filters=filters, entries=entries)


def _is_filtered(path: str, filters: tuple[str, ...]) -> bool:
    return any(pattern in path for pattern in filters)


def schema_to_document(schema: FullSchema) -> dict[str, list[dict[str, Any]]]:
    """Project a full schema onto JSON-ready primitives."""
    return {
        collection_name: [_field_to_document(field) for field in fields]
        for collection_name, fields in schema.items()
    }


def _field_to_document(field: FieldSchema) -> dict[str, Any]:
    document: dict[str, Any] = {"name": field.name, "types": list(field.types)}
    if field.sub_fields is not None:
        document["subFields"] = [_field_to_document(child) for child in field.sub_fields]
    if field.truncated:
        document["truncated"] = True
    return document


def load_full_schema(text: str) -> FullSchema:
    """Parse a full-schema JSON document written by ``schema_to_document``."""
    try:
        root = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid schema document: {exc}") from exc
    if not isinstance(root, Mapping):
        raise SchemaError("Schema document root must be an object of collections.")

    schema: FullSchema = {}
    for collection_name, fields in root.items():
        schema[collection_name] = _fields_from_document(fields, location=collection_name)
    return schema


def _fields_from_document(value: Any, *, location: str) -> tuple[FieldSchema, ...]:
    if not isinstance(value, list):
        raise SchemaError(f"Fields of '{location}' must be a list.")
    return tuple(_field_from_document(item, location=location) for item in value)


def _field_from_document(value: Any, *, location: str) -> FieldSchema:
    if not isinstance(value, Mapping):
        raise SchemaError(f"Field entries of '{location}' must be objects.")
    name = value.get("name")
    if not isinstance(name, str) or not name:
        raise SchemaError(f"Field entries of '{location}' must have a name.")
    types = value.get("types")
    if not isinstance(types, list) or not all(isinstance(item, str) for item in types):
        raise SchemaError(f"Field '{location}.{name}' types must be a list of strings.")
    sub_fields = None
    if "subFields" in value:
        sub_fields = _fields_from_document(value["subFields"], location=f"{location}.{name}")
    return FieldSchema(
        name=name,
        types=tuple(types),
        sub_fields=sub_fields,
        truncated=bool(value.get("truncated", False)),
    )
