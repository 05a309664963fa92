"""Results writing domain exports."""

from .report_models import SchemaReportPaths
from .schema_report_writer import read_full_schema, write_flattened_schema, write_schema_reports

__all__ = [
    "SchemaReportPaths",
    "read_full_schema",
    "write_flattened_schema",
    "write_schema_reports",
]
