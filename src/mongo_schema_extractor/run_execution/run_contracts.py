"""Run execution entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mongo_schema_extractor.schema_inference.inference_outcomes import CollectionFailure


@dataclass(frozen=True)
class RunRequest:
    """Input contract for executing one extraction run."""

    config_path: str
    output_dir: str | None = None
    prefix: str | None = None


@dataclass(frozen=True)
class RunOutcome:
    """Output contract for one completed extraction run."""

    schema_path: Path
    flattened_path: Path
    collection_count: int
    failed_collections: tuple[CollectionFailure, ...] = ()
