"""Extraction run use-case service."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from pathlib import Path

from mongo_schema_extractor.configuration import (
    Configuration,
    ConfigurationError,
    MongoSettings,
    load_configuration,
)
from mongo_schema_extractor.document_store import (
    DocumentStore,
    DocumentStoreError,
    open_mongo_document_store,
)
from mongo_schema_extractor.results_writing import write_schema_reports
from mongo_schema_extractor.schema_inference import (
    InferenceLogger,
    InferenceOutcome,
    SchemaInferrer,
)
from mongo_schema_extractor.schema_management import flatten_schema

from .run_contracts import RunOutcome, RunRequest

StoreOpener = Callable[[MongoSettings], AbstractContextManager[DocumentStore]]


class RunExecutionError(Exception):
    """Raised when an extraction run cannot be completed."""


def execute_schema_extraction_run(
    request: RunRequest,
    *,
    store_opener: StoreOpener | None = None,
    logger: InferenceLogger | None = None,
) -> RunOutcome:
    """Infer every collection, flatten the result and write both schema documents.

    Nothing is written unless every collection was inferred, or skipped when the
    configuration disables fail-fast.
    """
    resolved_store_opener = store_opener or open_mongo_document_store
    configuration = _load_run_configuration(request.config_path)
    outcome = _infer_schema(configuration, resolved_store_opener, logger)

    flattened = flatten_schema(outcome.schema, configuration.extraction.filtered_fields)
    output_dir = Path(request.output_dir) if request.output_dir else configuration.output.directory
    prefix = request.prefix or configuration.output.prefix
    try:
        paths = write_schema_reports(
            outcome.schema, flattened, output_dir=output_dir, prefix=prefix
        )
    except OSError as exc:
        raise RunExecutionError(f"Failed to write schema documents: {exc}") from exc

    return RunOutcome(
        schema_path=paths.schema_path,
        flattened_path=paths.flattened_path,
        collection_count=len(outcome.schema),
        failed_collections=outcome.failed_collections,
    )


def _load_run_configuration(config_path: str) -> Configuration:
    try:
        return load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise RunExecutionError(str(exc)) from exc


def _infer_schema(
    configuration: Configuration,
    store_opener: StoreOpener,
    logger: InferenceLogger | None,
) -> InferenceOutcome:
    try:
        with store_opener(configuration.mongodb) as store:
            inferrer = SchemaInferrer(store, configuration.extraction, logger)
            return inferrer.infer_all_collections()
    except DocumentStoreError as exc:
        raise RunExecutionError(str(exc)) from exc
