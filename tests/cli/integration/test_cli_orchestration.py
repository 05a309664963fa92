"""CLI orchestration integration tests."""

from __future__ import annotations

import json
from contextlib import contextmanager
from pathlib import Path

import mongo_schema_extractor.run_execution.extraction_run_use_case as use_case_module
import pytest
from click.testing import CliRunner
from mongo_schema_extractor.cli import cli
from mongo_schema_extractor.document_store import InMemoryDocumentStore, StoreConnectionError


def _write_config(tmp_path: Path) -> Path:
    config = {
        "mongodb": {"uri": "mongodb://localhost:27017", "database": "app"},
        "output": {"directory": str(tmp_path / ".tmp")},
    }
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config), encoding="utf-8")
    return path


@pytest.fixture
def fake_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryDocumentStore:
    store = InMemoryDocumentStore(
        {
            "users": [
                {"name": "Al", "age": 30, "__v": 0},
                {"name": "Bo", "address": {"city": "NY", "geo": {"lat": 40.7}}},
            ],
            "orders": [{"items": [{"sku": "a"}, {"sku": "b", "qty": 2}]}],
        }
    )

    @contextmanager
    def _open(settings):
        yield store

    monkeypatch.setattr(use_case_module, "open_mongo_document_store", _open)
    monkeypatch.delenv("PREFIX_FILE", raising=False)
    return store


def test_extract_command_writes_schema_documents(tmp_path: Path, fake_store) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)

    result = runner.invoke(cli, ["extract", "--config", str(config_path)])

    assert result.exit_code == 0
    schema_path = tmp_path / ".tmp" / "app-schema.json"
    flattened_path = tmp_path / ".tmp" / "app-flattened.json"
    assert str(schema_path.resolve()) in result.output
    assert str(flattened_path.resolve()) in result.output
    flattened = json.loads(flattened_path.read_text(encoding="utf-8"))
    assert flattened == {
        "users": {
            "name": "string",
            "age": "number",
            "address": "object",
            "address.city": "string",
            "address.geo": "object",
            "address.geo.lat": "number",
        },
        "orders": {"items": "array", "items.sku": "string", "items.qty": "number"},
    }


def test_extract_command_honors_prefix_and_output_dir(tmp_path: Path, fake_store) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)
    output_dir = tmp_path / "reports"

    result = runner.invoke(
        cli,
        [
            "extract",
            "--config",
            str(config_path),
            "--output-dir",
            str(output_dir),
            "--prefix",
            "nightly",
            "--log-level",
            "warning",
        ],
    )

    assert result.exit_code == 0
    assert (output_dir / "nightly-schema.json").exists()
    assert (output_dir / "nightly-flattened.json").exists()


def test_extract_command_reports_connection_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    @contextmanager
    def _unreachable(settings):
        raise StoreConnectionError("Cannot connect to MongoDB: connection refused")
        yield  # pragma: no cover

    monkeypatch.setattr(use_case_module, "open_mongo_document_store", _unreachable)
    runner = CliRunner()

    result = runner.invoke(cli, ["extract", "--config", str(_write_config(tmp_path))])

    assert result.exit_code != 0
    assert "Cannot connect to MongoDB" in str(result.exception)
    assert not (tmp_path / ".tmp").exists()


def test_flatten_command_reapplies_exclusions(tmp_path: Path, fake_store) -> None:
    runner = CliRunner()
    config_path = _write_config(tmp_path)
    extract_result = runner.invoke(cli, ["extract", "--config", str(config_path)])
    assert extract_result.exit_code == 0
    output_path = tmp_path / "custom-flattened.json"

    result = runner.invoke(
        cli,
        [
            "flatten",
            "--schema",
            str(tmp_path / ".tmp" / "app-schema.json"),
            "--output",
            str(output_path),
            "--filter",
            "geo",
            "--filter",
            "age",
        ],
    )

    assert result.exit_code == 0
    assert str(output_path.resolve()) in result.output
    flattened = json.loads(output_path.read_text(encoding="utf-8"))
    assert flattened["users"] == {
        "name": "string",
        "__v": "number",
        "address": "object",
        "address.city": "string",
    }


def test_flatten_command_without_filters_keeps_every_path(tmp_path: Path, fake_store) -> None:
    runner = CliRunner()
    extract_result = runner.invoke(cli, ["extract", "--config", str(_write_config(tmp_path))])
    assert extract_result.exit_code == 0
    output_path = tmp_path / "everything.json"

    result = runner.invoke(
        cli,
        [
            "flatten",
            "--schema",
            str(tmp_path / ".tmp" / "app-schema.json"),
            "--output",
            str(output_path),
            "--no-filter",
        ],
    )

    assert result.exit_code == 0
    flattened = json.loads(output_path.read_text(encoding="utf-8"))
    assert flattened["users"]["__v"] == "number"
    assert flattened["users"]["address.geo.lat"] == "number"


def test_generate_config_command_writes_placeholder_file_with_default_name(tmp_path: Path) -> None:
    runner = CliRunner()
    with runner.isolated_filesystem(temp_dir=str(tmp_path)):
        result = runner.invoke(cli, ["generate-config"])
        output_path = Path("config.yaml").resolve()

        assert result.exit_code == 0
        assert output_path.exists()
        content = output_path.read_text(encoding="utf-8")
        assert "mongodb:" in content
        assert "extraction:" in content
        assert "output:" in content
        assert "<REQUIRED>" in content
        assert str(output_path) in result.output


def test_generate_config_command_refuses_to_overwrite(tmp_path: Path) -> None:
    runner = CliRunner()
    existing = tmp_path / "config.yaml"
    existing.write_text("keep", encoding="utf-8")

    result = runner.invoke(cli, ["generate-config", "--output", str(existing)])

    assert result.exit_code != 0
    assert "already exists" in str(result.exception)
    assert existing.read_text(encoding="utf-8") == "keep"
