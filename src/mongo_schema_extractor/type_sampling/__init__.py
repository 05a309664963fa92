"""Type sampling exports."""

from .type_tags import ARRAY_TAG, OBJECT_TAG, classify_value, is_composite, store_type_tag

__all__ = [
    "ARRAY_TAG",
    "OBJECT_TAG",
    "classify_value",
    "is_composite",
    "store_type_tag",
]
