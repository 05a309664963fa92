"""Results writing entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SchemaReportPaths:
    """Locations of the documents written for one extraction run."""

    schema_path: Path
    flattened_path: Path
