"""Schema inference exports."""

from .inference_outcomes import CollectionFailure, InferenceLogger, InferenceOutcome
from .schema_inferrer import SchemaInferrer

__all__ = [
    "CollectionFailure",
    "InferenceLogger",
    "InferenceOutcome",
    "SchemaInferrer",
]
