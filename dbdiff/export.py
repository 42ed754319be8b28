"""Schema export: resolve the engine, extract, format and write the result."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from dbdiff.errors import InputValidationError, SchemaWriteError
from dbdiff.extractors.base import CancelSignal
from dbdiff.extractors.factory import SchemaExtractorFactory
from dbdiff.extractors.resolver import resolve_engine
from dbdiff.formatter import CustomTextFormatter, SchemaFormatter
from dbdiff.validation.paths import validate_output_path

# ============================================================================
# Request
# ============================================================================


@dataclass(frozen=True)
class SchemaExportRequest:
    """What to export and where to.

    The output path is validated on construction, so a request that exists
    always carries a safe absolute path. Path problems raise here, before any
    database work starts.

    Raises:
        InputValidationError: If the connection string or output path is blank or malformed
        PathSecurityError: If the output path is outside ``allowed_base`` or in a system directory
    """

    connection_string: str
    output_path: Path
    database_type: str | None = None
    allowed_base: Path | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.connection_string is None or not self.connection_string.strip():
            raise InputValidationError("Connection string cannot be null or empty.")
        # Frozen dataclass: store the validated path through object.__setattr__
        object.__setattr__(self, "output_path", validate_output_path(self.output_path, self.allowed_base))


# ============================================================================
# Result
# ============================================================================


class ExportSuccess(BaseModel):
    """The schema was written"""

    status: Literal["success"] = Field(default="success", description="Outcome discriminator")
    output_path: Path = Field(description="Absolute path of the written file")
    table_count: int = Field(ge=0, description="Number of tables exported")
    view_count: int = Field(ge=0, description="Number of views exported")

    @property
    def success(self) -> bool:
        return True


class ExportFailure(BaseModel):
    """The export did not complete; nothing was written"""

    status: Literal["failure"] = Field(default="failure", description="Outcome discriminator")
    error_message: str = Field(description="Human readable reason")

    @property
    def success(self) -> bool:
        return False


SchemaExportResult = ExportSuccess | ExportFailure


# ============================================================================
# Service
# ============================================================================


class SchemaExportService:
    """Runs one export from connection string to output file.

    All collaborators are passed in; nothing here is process-wide.
    """

    def __init__(
        self,
        extractor_factory: SchemaExtractorFactory | None = None,
        formatter: SchemaFormatter | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.extractor_factory = extractor_factory or SchemaExtractorFactory()
        self.formatter = formatter or CustomTextFormatter()
        self.logger = logger or logging.getLogger(__name__)

    def export_schema(self, request: SchemaExportRequest, cancel: CancelSignal | None = None) -> SchemaExportResult:
        """Export the schema described by ``request``.

        Every error raised while resolving, extracting, formatting or writing
        is logged and returned as an ``ExportFailure``; none propagate.

        Args:
            request: Validated export request
            cancel: Optional cancellation signal honoured between catalog queries

        Returns:
            ``ExportSuccess`` with table and view counts, or ``ExportFailure``
        """
        try:
            self.logger.info("Starting schema extraction from database")

            variant = resolve_engine(request.connection_string, request.database_type)
            extractor = self.extractor_factory.create_extractor(variant)
            schema = extractor.extract_schema(request.connection_string, cancel)

            self.logger.info(
                f"Successfully extracted schema from database {schema.database_name} "
                f"with {len(schema.tables)} tables and {len(schema.views)} views"
            )

            formatted = self.formatter.format(schema)

            output_path = request.output_path
            output_directory = output_path.parent
            try:
                if not output_directory.exists():
                    output_directory.mkdir(parents=True, exist_ok=True)
                    self.logger.debug(f"Created output directory: {output_directory}")
                output_path.write_text(formatted, encoding="utf-8", newline="\n")
            except OSError as e:
                raise SchemaWriteError(f"Could not write schema to {output_path}: {e}") from e

            self.logger.info(f"Schema exported successfully to {output_path}")

            return ExportSuccess(
                output_path=output_path,
                table_count=len(schema.tables),
                view_count=len(schema.views),
            )

        except Exception as e:
            self.logger.error(f"Failed to export schema: {e}", exc_info=True)
            return ExportFailure(error_message=str(e) or e.__class__.__name__)
