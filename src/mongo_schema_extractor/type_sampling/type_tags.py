"""Value classification into coarse type tags."""

from __future__ import annotations

import datetime
import decimal
import re
import uuid
from collections.abc import Mapping
from typing import Any

from bson import (
    Binary,
    Code,
    DBRef,
    Decimal128,
    Int64,
    MaxKey,
    MinKey,
    ObjectId,
    Regex,
    Timestamp,
)

OBJECT_TAG = "object"
ARRAY_TAG = "array"

_COMPOSITE_TAGS = frozenset({OBJECT_TAG, ARRAY_TAG})

_NUMERIC_STORE_LABELS = frozenset({"double", "int", "long", "decimal"})

# Checked in order: bool subclasses int and Code subclasses str.
_PRIMITIVE_TAGS: tuple[tuple[type | tuple[type, ...], str], ...] = (
    (bool, "boolean"),
    ((int, float, Int64, Decimal128, decimal.Decimal), "number"),
    (Code, "javascript"),
    (str, "string"),
    (ObjectId, "objectId"),
    (datetime.datetime, "date"),
    ((bytes, Binary, uuid.UUID), "binData"),
    ((Regex, re.Pattern), "regex"),
    (Timestamp, "timestamp"),
    (MinKey, "minKey"),
    (MaxKey, "maxKey"),
)


def classify_value(value: Any) -> str:
    """Return the type tag of one value.

    Sequences are always ``array`` regardless of their elements and mappings
    are always ``object``; the test is never structural beyond that.
    """
    if isinstance(value, (list, tuple)):
        return ARRAY_TAG
    # A DBRef is stored as an embedded document.
    if isinstance(value, (Mapping, DBRef)):
        return OBJECT_TAG
    if value is None:
        return "null"
    for python_types, tag in _PRIMITIVE_TAGS:
        if isinstance(value, python_types):
            return tag
    return type(value).__name__


def store_type_tag(label: str) -> str:
    """Map a MongoDB ``$type`` label onto the ``classify_value`` vocabulary."""
    if label in _NUMERIC_STORE_LABELS:
        return "number"
    if label == "bool":
        return "boolean"
    if label == "javascriptWithScope":
        return "javascript"
    return label


def is_composite(tag: str) -> bool:
    """Return whether values of this tag carry nested fields."""
    return tag in _COMPOSITE_TAGS
