"""Schema inference entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from mongo_schema_extractor.schema_management.schema_models import FullSchema


class InferenceLogger(Protocol):
    """Sink for progress and failure messages; ``logging.Logger`` satisfies it."""

    def info(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...


@dataclass(frozen=True)
class CollectionFailure:
    """A collection skipped because one of its queries failed."""

    collection_name: str
    message: str


@dataclass(frozen=True)
class InferenceOutcome:
    """Result of inferring every collection of a database."""

    schema: FullSchema
    failed_collections: tuple[CollectionFailure, ...] = field(default=())
