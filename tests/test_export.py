"""Tests for the schema export service"""

import logging
import threading
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dbdiff.errors import CatalogReadError, InputValidationError, PathSecurityError
from dbdiff.export import ExportFailure, ExportSuccess, SchemaExportRequest, SchemaExportService
from dbdiff.formatter import CustomTextFormatter
from dbdiff.models import DatabaseSchema, EngineVariant


class TestSchemaExportRequest:
    """Tests for request validation"""

    def test_output_path_resolved(self, tmp_path: Path) -> None:
        """Test that the stored path is absolute and validated"""
        request = SchemaExportRequest(connection_string="Data Source=x.db", output_path=tmp_path / "a" / ".." / "s.txt")
        assert request.output_path == (tmp_path / "s.txt").resolve()

    def test_blank_connection_string(self, tmp_path: Path) -> None:
        """Test that a connection string is required"""
        with pytest.raises(InputValidationError):
            SchemaExportRequest(connection_string=" ", output_path=tmp_path / "s.txt")

    def test_outside_allowed_base(self, tmp_path: Path) -> None:
        """Test that path violations raise when the request is built"""
        with pytest.raises(PathSecurityError):
            SchemaExportRequest(
                connection_string="Data Source=x.db",
                output_path=tmp_path / "elsewhere" / "s.txt",
                allowed_base=tmp_path / "exports",
            )

    def test_directory_only_output(self, tmp_path: Path) -> None:
        """Test that an output path naming no file is rejected"""
        with pytest.raises(InputValidationError):
            SchemaExportRequest(connection_string="Data Source=x.db", output_path=f"{tmp_path}/")  # type: ignore[arg-type]


class TestSchemaExportService:
    """Tests for SchemaExportService.export_schema"""

    def test_exports_sqlite_database(self, sqlite_db: Path, tmp_path: Path) -> None:
        """Test an end-to-end export to a new directory"""
        output = tmp_path / "out" / "nested" / "schema.txt"
        request = SchemaExportRequest(connection_string=f"Data Source={sqlite_db}", output_path=output, database_type="sqlite")

        result = SchemaExportService().export_schema(request)

        assert isinstance(result, ExportSuccess)
        assert result.success
        assert result.output_path == output.resolve()
        assert result.table_count == 2
        assert result.view_count == 1

        content = output.read_bytes().decode("utf-8")
        assert content.startswith("DATABASE: main\nEXTRACTED: ")
        assert "TABLE: sqlite.orders\n" in content
        assert "VIEW: sqlite.big_orders\n  DEFINITION:\n    CREATE VIEW big_orders AS\n" in content
        assert "\r" not in content

    def test_resolves_engine_from_connection_string(self, sqlite_db: Path, tmp_path: Path) -> None:
        """Test that sqlite URLs need no explicit database type"""
        request = SchemaExportRequest(connection_string=f"sqlite:///{sqlite_db}", output_path=tmp_path / "schema.txt")

        result = SchemaExportService().export_schema(request)

        assert result.success

    def test_overwrites_existing_file(self, sqlite_db: Path, tmp_path: Path) -> None:
        """Test that an existing output file is replaced"""
        output = tmp_path / "schema.txt"
        output.write_text("stale")
        request = SchemaExportRequest(connection_string=f"sqlite:///{sqlite_db}", output_path=output)

        SchemaExportService().export_schema(request)

        assert "stale" not in output.read_text(encoding="utf-8")

    def test_formatter_options_applied(self, sqlite_db: Path, tmp_path: Path) -> None:
        """Test that the injected formatter decides the output shape"""
        output = tmp_path / "schema.txt"
        request = SchemaExportRequest(connection_string=f"sqlite:///{sqlite_db}", output_path=output)
        formatter = CustomTextFormatter(include_ordinal_position=False, include_view_definitions=False)

        SchemaExportService(formatter=formatter).export_schema(request)

        content = output.read_text(encoding="utf-8")
        assert "OrdinalPosition" not in content
        assert "DEFINITION:" not in content

    def test_failure_returned_not_raised(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that extraction errors become ExportFailure and nothing is written"""
        output = tmp_path / "schema.txt"
        extractor = MagicMock()
        extractor.extract_schema.side_effect = CatalogReadError("Failed to read catalog metadata: boom")
        factory = MagicMock()
        factory.create_extractor.return_value = extractor
        request = SchemaExportRequest(
            connection_string="Server=db;Database=Shop", output_path=output, database_type="sqlserver"
        )

        with caplog.at_level(logging.ERROR, logger="dbdiff"):
            result = SchemaExportService(extractor_factory=factory).export_schema(request)

        assert isinstance(result, ExportFailure)
        assert not result.success
        assert "boom" in result.error_message
        assert not output.exists()
        factory.create_extractor.assert_called_once_with(EngineVariant.SQLSERVER)
        assert "Failed to export schema" in caplog.text

    def test_unknown_database_type_is_failure(self, tmp_path: Path) -> None:
        """Test that an unsupported engine token fails the export"""
        request = SchemaExportRequest(connection_string="Server=db", output_path=tmp_path / "s.txt", database_type="oracle")

        result = SchemaExportService().export_schema(request)

        assert isinstance(result, ExportFailure)
        assert "oracle" in result.error_message

    def test_missing_database_is_failure(self, tmp_path: Path) -> None:
        """Test that connection errors are reported, not raised"""
        request = SchemaExportRequest(
            connection_string=f"Data Source={tmp_path / 'missing.db'}",
            output_path=tmp_path / "schema.txt",
            database_type="sqlite",
        )

        result = SchemaExportService().export_schema(request)

        assert isinstance(result, ExportFailure)
        assert not (tmp_path / "schema.txt").exists()

    def test_cancelled_export_is_failure(self, sqlite_db: Path, tmp_path: Path) -> None:
        """Test that cancellation produces a failure and no file"""
        cancel = threading.Event()
        cancel.set()
        output = tmp_path / "schema.txt"
        request = SchemaExportRequest(connection_string=f"sqlite:///{sqlite_db}", output_path=output)

        result = SchemaExportService().export_schema(request, cancel)

        assert isinstance(result, ExportFailure)
        assert "cancelled" in result.error_message
        assert not output.exists()

    def test_write_failure_is_failure(self, tmp_path: Path, extracted_at: datetime) -> None:
        """Test that an unwritable destination is reported as a failure"""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file where a directory should be")
        extractor = MagicMock()
        extractor.extract_schema.return_value = DatabaseSchema(database_name="Shop", extracted_at=extracted_at)
        factory = MagicMock()
        factory.create_extractor.return_value = extractor
        request = SchemaExportRequest(
            connection_string="Server=db;Database=Shop", output_path=blocker / "schema.txt"
        )

        result = SchemaExportService(extractor_factory=factory).export_schema(request)

        assert isinstance(result, ExportFailure)
        assert "Could not write schema" in result.error_message
