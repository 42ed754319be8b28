"""dbdiff: export database schemas as deterministic, diff-friendly text.

Two exports of databases with the same tables, views and columns produce
byte-identical files (apart from the header), whichever engine or extraction
order they came from.
"""

from dbdiff.errors import (
    CatalogReadError,
    DatabaseConnectionError,
    DbDiffError,
    ExtractionCancelledError,
    InputValidationError,
    PathSecurityError,
    SchemaWriteError,
    UnsupportedEngineError,
)
from dbdiff.export import ExportFailure, ExportSuccess, SchemaExportRequest, SchemaExportResult, SchemaExportService
from dbdiff.formatter import CustomTextFormatter
from dbdiff.models import Column, DatabaseSchema, DataType, EngineVariant, Table, View

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Models
    "Column",
    "DataType",
    "DatabaseSchema",
    "EngineVariant",
    "Table",
    "View",
    # Export
    "CustomTextFormatter",
    "ExportFailure",
    "ExportSuccess",
    "SchemaExportRequest",
    "SchemaExportResult",
    "SchemaExportService",
    # Errors
    "CatalogReadError",
    "DatabaseConnectionError",
    "DbDiffError",
    "ExtractionCancelledError",
    "InputValidationError",
    "PathSecurityError",
    "SchemaWriteError",
    "UnsupportedEngineError",
]
