"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mongo_schema_extractor.schema_management.schema_projection import DEFAULT_FILTERED_FIELDS

DEFAULT_MAX_DEPTH = 100


@dataclass(frozen=True)
class MongoSettings:
    """MongoDB connectivity configuration."""

    uri: str
    database: str
    server_selection_timeout_ms: int = 30000
    socket_timeout_ms: int = 0


@dataclass(frozen=True)
class ExtractionSettings:
    """Schema inference and flattening behavior."""

    filtered_fields: tuple[str, ...] = DEFAULT_FILTERED_FIELDS
    max_depth: int = DEFAULT_MAX_DEPTH
    fail_fast: bool = True


@dataclass(frozen=True)
class OutputSettings:
    """Destination of the written schema documents."""

    directory: Path
    prefix: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    mongodb: MongoSettings
    extraction: ExtractionSettings
    output: OutputSettings
