"""Schema management entities."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldSchema:
    """One node of an inferred schema tree.

    ``types`` is semantically a set. ``sub_fields`` is ``None`` for leaves and
    for nodes whose expansion stopped at the depth ceiling (``truncated``).
    """

    name: str
    types: tuple[str, ...]
    sub_fields: tuple[FieldSchema, ...] | None = None
    truncated: bool = False


FullSchema = dict[str, tuple[FieldSchema, ...]]
"""Collection name to its ordered top-level fields."""

FlattenSchema = dict[str, dict[str, str]]
"""Collection name to dotted field path to comma-joined type tags."""
