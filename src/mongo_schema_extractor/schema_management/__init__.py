"""Schema management exports."""

from .schema_models import FieldSchema, FlattenSchema, FullSchema
from .schema_projection import (
    DEFAULT_FILTERED_FIELDS,
    SchemaError,
    flatten_schema,
    load_full_schema,
    schema_to_document,
)

__all__ = [
    "DEFAULT_FILTERED_FIELDS",
    "FieldSchema",
    "FlattenSchema",
    "FullSchema",
    "SchemaError",
    "flatten_schema",
    "load_full_schema",
    "schema_to_document",
]
