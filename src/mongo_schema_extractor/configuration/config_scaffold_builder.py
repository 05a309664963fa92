"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "config.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Extraction configuration template for mongo-schema-extractor.
# Replace every <REQUIRED> placeholder before running extract.
# Remove <OPTIONAL> entries you do not need; defaults are shown in comments.

mongodb:
  # Falls back to the MONGO_URL environment variable when omitted.
  uri: "<REQUIRED>"
  # Falls back to the MONGO_DATABASE environment variable when omitted.
  database: "<REQUIRED>"
  # server_selection_timeout_ms: 30000
  # socket_timeout_ms: 0  # 0 disables the socket timeout

extraction:
  # Flattened paths containing any of these substrings are dropped.
  filtered_fields:
    - ".buffer"
    - "__v"
  # Nested objects and arrays deeper than this are recorded as truncated.
  # max_depth: 100
  # Set to false to skip collections whose queries fail instead of aborting.
  # fail_fast: true

output:
  # Relative paths are resolved against this file's directory.
  directory: ".tmp"
  # Falls back to PREFIX_FILE, then to the database name.
  # prefix: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML extraction configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
