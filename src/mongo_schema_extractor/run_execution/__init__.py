"""Run execution domain exports."""

from .extraction_run_use_case import RunExecutionError, execute_schema_extraction_run
from .run_contracts import RunOutcome, RunRequest

__all__ = [
    "RunRequest",
    "RunOutcome",
    "RunExecutionError",
    "execute_schema_extraction_run",
]
