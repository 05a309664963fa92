"""Command line interface entry point."""

from __future__ import annotations

import logging
import sys

import click

from mongo_schema_extractor.configuration import (
    DEFAULT_CONFIG_FILENAME,
    write_placeholder_configuration,
)
from mongo_schema_extractor.results_writing import read_full_schema, write_flattened_schema
from mongo_schema_extractor.run_execution import (
    RunExecutionError,
    RunRequest,
    execute_schema_extraction_run,
)
from mongo_schema_extractor.schema_management import (
    DEFAULT_FILTERED_FIELDS,
    SchemaError,
    flatten_schema,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s [mongo-schema-extractor] %(name)s: %(message)s"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="mongo-schema-extractor")
def cli() -> None:
    """Infer and flatten the schema of every collection in a MongoDB database."""


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML extraction configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML extraction configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="extract")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON extraction configuration file",
)
@click.option(
    "--output-dir",
    "output_dir",
    required=False,
    type=click.Path(path_type=str),
    help="Directory for the schema documents, overriding output.directory",
)
@click.option(
    "--prefix",
    "prefix",
    required=False,
    type=str,
    help="File name prefix for the schema documents, overriding output.prefix",
)
@click.option(
    "--log-level",
    "log_level",
    default="INFO",
    show_default=True,
    type=click.Choice(_LOG_LEVELS, case_sensitive=False),
    help="Verbosity of progress messages written to stderr",
)
def extract(config_path: str, output_dir: str | None, prefix: str | None, log_level: str) -> None:
    """Extract the full and flattened schema of every collection."""
    _configure_logging(log_level)
    try:
        outcome = execute_schema_extraction_run(
            RunRequest(config_path=config_path, output_dir=output_dir, prefix=prefix)
        )
    except RunExecutionError as exc:
        raise CliError(str(exc)) from exc
    for failure in outcome.failed_collections:
        click.echo(f"skipped {failure.collection_name}: {failure.message}", err=True)
    click.echo(str(outcome.schema_path))
    click.echo(str(outcome.flattened_path))


@cli.command(name="flatten")
@click.option(
    "--schema",
    "schema_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a full schema document written by extract",
)
@click.option(
    "--output",
    "output_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the flattened schema document to write",
)
@click.option(
    "--filter",
    "filtered_fields",
    multiple=True,
    help="Substring excluding matching field paths; repeatable. "
    f"Defaults to {', '.join(DEFAULT_FILTERED_FIELDS)}",
)
@click.option(
    "--no-filter",
    "no_filter",
    is_flag=True,
    default=False,
    help="Keep every field path, including the default exclusions",
)
def flatten(
    schema_path: str, output_path: str, filtered_fields: tuple[str, ...], no_filter: bool
) -> None:
    """Re-flatten an extracted full schema with a different exclusion list."""
    if no_filter and filtered_fields:
        raise click.UsageError("--filter and --no-filter cannot be combined.")
    exclusions = () if no_filter else filtered_fields or DEFAULT_FILTERED_FIELDS
    try:
        schema = read_full_schema(schema_path)
        flattened = flatten_schema(schema, exclusions)
        resolved_output = write_flattened_schema(flattened, output_path)
    except (SchemaError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


def _configure_logging(log_level: str) -> None:
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT, stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
