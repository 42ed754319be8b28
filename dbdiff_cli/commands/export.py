"""Schema export command."""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import typer

from dbdiff.config import DEFAULT_OUTPUT_PATH, AppConfig, load_config
from dbdiff.errors import DbDiffError, InputValidationError, PathSecurityError
from dbdiff.export import ExportFailure, ExportSuccess, SchemaExportRequest, SchemaExportResult, SchemaExportService
from dbdiff.extractors.factory import SchemaExtractorFactory
from dbdiff.formatter import CustomTextFormatter
from dbdiff.logging_config import configure_logging
from dbdiff.validation.paths import validate_config_path, validate_log_path
from dbdiff_cli.output import error_message, export_summary

logger = logging.getLogger("dbdiff.cli")

CONNECTION_HELP = (
    "Provide it via:\n"
    "  --connection argument\n"
    "  DBDIFF_ConnectionStrings__Default environment variable\n"
    "  appsettings.json configuration file"
)


def _load_settings(config_file: str | None) -> AppConfig:
    config_path = None
    if config_file:
        try:
            # Config files may only come from the working directory tree
            config_path = validate_config_path(config_file, allowed_base=Path.cwd())
        except (FileNotFoundError, PathSecurityError, InputValidationError) as e:
            error_message(f"Error: Invalid configuration file: {e}")
            raise typer.Exit(1) from e

    try:
        return load_config(config_path)
    except InputValidationError as e:
        error_message(f"Error: {e}", hint="Check the configuration file and DBDIFF_ environment variables")
        raise typer.Exit(1) from e


def _run_export(service: SchemaExportService, request: SchemaExportRequest) -> SchemaExportResult:
    """Run the export on a worker thread so Ctrl+C cancels it between catalog queries."""
    cancel = threading.Event()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(service.export_schema, request, cancel)
        try:
            return future.result()
        except KeyboardInterrupt:
            cancel.set()
            typer.secho("Cancelling...", fg=typer.colors.YELLOW, err=True)
            return future.result()


def export(
    connection: str | None = typer.Option(None, "--connection", "-c", help="Database connection string"),
    output: str | None = typer.Option(None, "--output", "-o", help=f"Output file path (default: {DEFAULT_OUTPUT_PATH})"),
    config_file: str | None = typer.Option(None, "--config", help="Configuration file path (JSON)"),
    database_type: str | None = typer.Option(
        None, "--database-type", "-d", help="Database type: sqlserver, postgresql or sqlite (default: auto-detect)"
    ),
    allowed_base: str | None = typer.Option(
        None, "--allowed-base", help="Only allow output paths inside this directory"
    ),
    ignore_position: bool = typer.Option(
        False, "--ignore-position", help="Exclude column ordinal positions from output"
    ),
    exclude_view_definitions: bool = typer.Option(
        False, "--exclude-view-definitions", help="Exclude view SQL definitions from output"
    ),
) -> None:
    """Export a database schema to a diff-friendly text file.

    Examples:
        dbdiff export -c "Server=localhost;Database=Shop;Trusted_Connection=true;" -o schema.txt

        dbdiff export -c "Host=localhost;Database=shop;Username=app;Password=secret" --ignore-position

        dbdiff export -c "Data Source=shop.db" -d sqlite -o schemas/shop.txt
    """
    config = _load_settings(config_file)

    raw_log_path = config.Logging.LogPath
    try:
        log_path = validate_log_path(raw_log_path)
    except DbDiffError as e:
        error_message(f"Error: Invalid log path '{raw_log_path}': {e}")
        raise typer.Exit(1) from e

    handler = configure_logging(log_path, config.Logging.Level)
    try:
        # Priority: CLI args > environment variables > config file
        connection_string = connection or config.ConnectionStrings.Default
        if not connection_string or not connection_string.strip():
            error_message("Error: Connection string is required.", hint=CONNECTION_HELP)
            raise typer.Exit(1)

        output_path = output or config.Export.OutputPath or DEFAULT_OUTPUT_PATH
        formatter = CustomTextFormatter(
            include_ordinal_position=not (ignore_position or config.Export.IgnorePosition),
            include_view_definitions=not (exclude_view_definitions or config.Export.ExcludeViewDefinitions),
        )

        try:
            request = SchemaExportRequest(
                connection_string=connection_string,
                output_path=Path(output_path),
                database_type=database_type or config.Export.DatabaseType,
                allowed_base=Path(allowed_base) if allowed_base else None,
            )
        except PathSecurityError as e:
            error_message(f"Security Error: {e}")
            logger.error(f"Unauthorized path access attempt: {e}")
            raise typer.Exit(1) from e
        except InputValidationError as e:
            error_message(f"Error: {e}")
            raise typer.Exit(1) from e

        typer.echo(f"Output: {request.output_path}")

        service = SchemaExportService(SchemaExtractorFactory(), formatter, logger)
        result = _run_export(service, request)

        match result:
            case ExportSuccess():
                export_summary(result.output_path, result.table_count, result.view_count)
            case ExportFailure():
                error_message(f"Export failed: {result.error_message}")
                raise typer.Exit(1)

    finally:
        logging.getLogger("dbdiff").removeHandler(handler)
        handler.close()
