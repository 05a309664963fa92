"""Schema report writer tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from mongo_schema_extractor.results_writing import (
    read_full_schema,
    write_flattened_schema,
    write_schema_reports,
)
from mongo_schema_extractor.schema_management import FieldSchema, FullSchema, SchemaError


def _schema() -> FullSchema:
    return {
        "users": (
            FieldSchema(name="name", types=("string",)),
            FieldSchema(
                name="address",
                types=("object",),
                sub_fields=(FieldSchema(name="city", types=("string",)),),
            ),
        ),
        "audit": (FieldSchema(name="at", types=("date",)),),
    }


def test_write_schema_reports_creates_directory_and_both_documents(tmp_path: Path) -> None:
    output_dir = tmp_path / "nested" / ".tmp"
    flattened = {
        "users": {"name": "string", "address": "object", "address.city": "string"},
        "audit": {"at": "date"},
    }

    paths = write_schema_reports(_schema(), flattened, output_dir=output_dir, prefix="app")

    assert paths.schema_path == (output_dir / "app-schema.json").resolve()
    assert paths.flattened_path == (output_dir / "app-flattened.json").resolve()
    schema_text = paths.schema_path.read_text(encoding="utf-8")
    assert schema_text.startswith('{\n  "users": [\n')
    assert json.loads(schema_text) == {
        "users": [
            {"name": "name", "types": ["string"]},
            {
                "name": "address",
                "types": ["object"],
                "subFields": [{"name": "city", "types": ["string"]}],
            },
        ],
        "audit": [{"name": "at", "types": ["date"]}],
    }
    written_flattened = json.loads(paths.flattened_path.read_text(encoding="utf-8"))
    assert list(written_flattened) == ["users", "audit"]
    assert list(written_flattened["users"]) == ["name", "address", "address.city"]


def test_written_full_schema_reads_back(tmp_path: Path) -> None:
    paths = write_schema_reports(_schema(), {}, output_dir=tmp_path, prefix="app")

    assert read_full_schema(paths.schema_path) == _schema()


def test_write_flattened_schema_returns_resolved_path(tmp_path: Path) -> None:
    destination = write_flattened_schema({"users": {"name": "string"}}, tmp_path / "out" / "f.json")

    assert destination == (tmp_path / "out" / "f.json").resolve()
    assert json.loads(destination.read_text(encoding="utf-8")) == {"users": {"name": "string"}}


def test_read_full_schema_rejects_invalid_document(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text('{"users": "nope"}', encoding="utf-8")

    with pytest.raises(SchemaError):
        read_full_schema(path)
