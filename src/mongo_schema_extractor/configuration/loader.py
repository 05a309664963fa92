"""Configuration loader service."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from mongo_schema_extractor.schema_management.schema_projection import DEFAULT_FILTERED_FIELDS

from .runtime_settings import (
    DEFAULT_MAX_DEPTH,
    Configuration,
    ExtractionSettings,
    MongoSettings,
    OutputSettings,
)

MONGO_URL_ENV = "MONGO_URL"
MONGO_DATABASE_ENV = "MONGO_DATABASE"
PREFIX_FILE_ENV = "PREFIX_FILE"

DEFAULT_OUTPUT_DIRECTORY = ".tmp"


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(
    config_path: Path | str, *, environ: Mapping[str, str] | None = None
) -> Configuration:
    """Load and validate the configuration file.

    ``mongodb.uri``, ``mongodb.database`` and ``output.prefix`` fall back to the
    ``MONGO_URL``, ``MONGO_DATABASE`` and ``PREFIX_FILE`` environment variables.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    mongodb = _parse_mongodb_section(parsed.get("mongodb"), env)
    extraction = _parse_extraction_section(parsed.get("extraction"))
    output = _parse_output_section(
        parsed.get("output"), path.parent, env, default_prefix=mongodb.database
    )

    return Configuration(path=path, mongodb=mongodb, extraction=extraction, output=output)


def _parse_mongodb_section(value: Any, env: Mapping[str, str]) -> MongoSettings:
    section = _optional_mapping(value, "mongodb")
    uri = _require_non_empty_string(
        section.get("uri") or env.get(MONGO_URL_ENV), f"mongodb.uri (or {MONGO_URL_ENV})"
    )
    database = _require_non_empty_string(
        section.get("database") or env.get(MONGO_DATABASE_ENV),
        f"mongodb.database (or {MONGO_DATABASE_ENV})",
    )
    server_selection_timeout_ms = _require_positive_int(
        section.get("server_selection_timeout_ms", 30000), "mongodb.server_selection_timeout_ms"
    )
    socket_timeout_ms = _require_non_negative_int(
        section.get("socket_timeout_ms", 0), "mongodb.socket_timeout_ms"
    )
    return MongoSettings(
        uri=uri,
        database=database,
        server_selection_timeout_ms=server_selection_timeout_ms,
        socket_timeout_ms=socket_timeout_ms,
    )


def _parse_extraction_section(value: Any) -> ExtractionSettings:
    section = _optional_mapping(value, "extraction")
    filtered_fields = _normalize_string_sequence(
        section.get("filtered_fields", list(DEFAULT_FILTERED_FIELDS)), "extraction.filtered_fields"
    )
    max_depth = _require_positive_int(
        section.get("max_depth", DEFAULT_MAX_DEPTH), "extraction.max_depth"
    )
    fail_fast = section.get("fail_fast", True)
    if not isinstance(fail_fast, bool):
        raise ConfigurationError("extraction.fail_fast must be a boolean.")
    return ExtractionSettings(
        filtered_fields=filtered_fields, max_depth=max_depth, fail_fast=fail_fast
    )


def _parse_output_section(
    value: Any, base_path: Path, env: Mapping[str, str], *, default_prefix: str
) -> OutputSettings:
    section = _optional_mapping(value, "output")
    directory_value = section.get("directory", DEFAULT_OUTPUT_DIRECTORY)
    directory = _require_non_empty_string(directory_value, "output.directory")
    prefix_value = section.get("prefix") or env.get(PREFIX_FILE_ENV) or default_prefix
    prefix = _require_non_empty_string(prefix_value, "output.prefix")
    if "/" in prefix or "\\" in prefix:
        raise ConfigurationError("output.prefix must not contain path separators.")
    return OutputSettings(directory=_resolve_path(base_path, directory), prefix=prefix)


def _normalize_string_sequence(value: Any, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else ()
    if isinstance(value, Sequence):
        normalized = []
        for item in value:
            if not isinstance(item, str):
                raise ConfigurationError(f"{field_name} entries must be strings.")
            stripped = item.strip()
            if stripped:
                normalized.append(stripped)
        return tuple(normalized)
    raise ConfigurationError(f"{field_name} must be a string or list of strings.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' must be a mapping.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if value is None:
        raise ConfigurationError(f"{field_name} is required.")
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _require_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return number


def _require_non_negative_int(value: Any, field_name: str) -> int:
    number = _require_int(value, field_name)
    if number < 0:
        raise ConfigurationError(f"{field_name} must not be negative.")
    return number
