"""Schema report writer service."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from mongo_schema_extractor.schema_management.schema_models import FlattenSchema, FullSchema
from mongo_schema_extractor.schema_management.schema_projection import (
    load_full_schema,
    schema_to_document,
)

from .report_models import SchemaReportPaths

_ENCODING = "utf-8"


def write_schema_reports(
    schema: FullSchema,
    flattened: FlattenSchema,
    *,
    output_dir: Path | str,
    prefix: str,
) -> SchemaReportPaths:
    """Write ``<prefix>-schema.json`` and ``<prefix>-flattened.json`` into ``output_dir``."""
    directory = Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)
    paths = SchemaReportPaths(
        schema_path=(directory / f"{prefix}-schema.json").resolve(),
        flattened_path=(directory / f"{prefix}-flattened.json").resolve(),
    )
    _write_json(paths.schema_path, schema_to_document(schema))
    _write_json(paths.flattened_path, flattened)
    return paths


def write_flattened_schema(flattened: FlattenSchema, output_path: Path | str) -> Path:
    """Write one flattened schema document and return its resolved path."""
    destination = Path(output_path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    _write_json(destination, flattened)
    return destination.resolve()


def read_full_schema(schema_path: Path | str) -> FullSchema:
    """Read a full schema document previously written by ``write_schema_reports``.

    Raises:
      SchemaError: If the document is not a valid full schema.
      OSError: If the file cannot be read.
    """
    return load_full_schema(Path(schema_path).read_text(encoding=_ENCODING))


def _write_json(path: Path, document: Any) -> None:
    # Key order is traversal order; never sort.
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding=_ENCODING)
