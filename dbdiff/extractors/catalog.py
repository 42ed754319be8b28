"""Catalog metadata reading shared by every engine.

Each engine describes its catalog with a ``CatalogQueries`` value. The
``CatalogReader`` runs those queries over one connection:

1. read the database name
2. list base tables, then the columns of each table
3. list views (when the engine has a views query), then the columns of each view

Every query is bound with parameters, and the cancellation signal is checked
before each round trip.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import ArgumentError, DBAPIError, NoSuchModuleError, SQLAlchemyError

from dbdiff.errors import CatalogReadError, DatabaseConnectionError, InputValidationError
from dbdiff.extractors.base import CancelSignal, raise_if_cancelled
from dbdiff.extractors.engine import (
    DRIVERS,
    build_database_url,
    create_database_engine,
    sanitize_connection_string,
)
from dbdiff.models import Column, DatabaseSchema, DataType, EngineVariant, Table, View

logger = logging.getLogger(__name__)

INSTALL_HINTS = {
    EngineVariant.SQLSERVER: "pip install 'dbdiff[mssql]'",
    EngineVariant.POSTGRESQL: "pip install 'dbdiff[postgres]'",
    EngineVariant.SQLITE: "SQLite support ships with Python",
}


@dataclass(frozen=True)
class CatalogQueries:
    """SQL used to read one engine's catalog.

    Result columns are aliased to common names so one reader handles all engines:

    - ``database_name``: the database name query returns one such column
    - ``schema_name``, ``object_name``: table and view listings
    - ``definition``: view listings only
    - ``column_name``, ``data_type``, ``is_nullable`` (``'YES'``/``'NO'``),
      ``character_maximum_length``, ``numeric_precision``, ``numeric_scale``,
      ``ordinal_position``: column listings

    The columns query receives the bind parameters named in ``column_binds``
    (a subset of ``schema_name`` and ``object_name``).
    """

    database_name: str
    tables: str
    columns: str
    views: str | None = None
    column_binds: tuple[str, ...] = ("schema_name", "object_name")


def _optional_int(value: Any) -> int | None:
    return None if value is None else int(value)


class CatalogReader:
    """Reads tables, views and columns through a set of catalog queries"""

    def __init__(self, queries: CatalogQueries) -> None:
        self.queries = queries

    def _fetch(self, conn: Connection, sql: str, params: dict[str, Any], cancel: CancelSignal | None) -> list[Any]:
        raise_if_cancelled(cancel)
        try:
            result = conn.execute(text(sql), params)
            return list(result.mappings())
        except SQLAlchemyError as e:
            raise CatalogReadError(f"Failed to read catalog metadata: {e}") from e

    def read_database_name(self, conn: Connection, cancel: CancelSignal | None = None) -> str:
        rows = self._fetch(conn, self.queries.database_name, {}, cancel)
        if not rows or not rows[0]["database_name"]:
            raise CatalogReadError("The database did not report its name")
        return str(rows[0]["database_name"])

    def read_columns(
        self,
        conn: Connection,
        schema_name: str,
        object_name: str,
        cancel: CancelSignal | None = None,
    ) -> list[Column]:
        """Read the columns of one table or view in native ordinal order."""
        available = {"schema_name": schema_name, "object_name": object_name}
        params = {name: available[name] for name in self.queries.column_binds}
        rows = self._fetch(conn, self.queries.columns, params, cancel)

        columns = []
        for row in rows:
            columns.append(
                Column(
                    name=row["column_name"],
                    data_type=DataType(row["data_type"]),
                    is_nullable=str(row["is_nullable"]).upper() == "YES",
                    ordinal_position=int(row["ordinal_position"]),
                    max_length=_optional_int(row["character_maximum_length"]),
                    precision=_optional_int(row["numeric_precision"]),
                    scale=_optional_int(row["numeric_scale"]),
                )
            )
        return columns

    def read_tables(self, conn: Connection, cancel: CancelSignal | None = None) -> list[Table]:
        rows = self._fetch(conn, self.queries.tables, {}, cancel)

        tables = []
        for row in rows:
            schema_name, table_name = row["schema_name"], row["object_name"]
            columns = self.read_columns(conn, schema_name, table_name, cancel)
            logger.debug(f"Read {len(columns)} columns from table {schema_name}.{table_name}")
            tables.append(Table(schema_name=schema_name, table_name=table_name, columns=columns))
        return tables

    def read_views(self, conn: Connection, cancel: CancelSignal | None = None) -> list[View]:
        if self.queries.views is None:
            return []

        rows = self._fetch(conn, self.queries.views, {}, cancel)

        views = []
        for row in rows:
            schema_name, view_name = row["schema_name"], row["object_name"]
            # Encrypted or unreadable definitions come back as NULL
            definition = row["definition"] or None
            columns = self.read_columns(conn, schema_name, view_name, cancel)
            logger.debug(f"Read {len(columns)} columns from view {schema_name}.{view_name}")
            views.append(View(schema_name=schema_name, view_name=view_name, columns=columns, definition=definition))
        return views

    def read_schema(self, conn: Connection, cancel: CancelSignal | None = None) -> DatabaseSchema:
        """Read the complete schema over an open connection."""
        extracted_at = datetime.now(timezone.utc)
        database_name = self.read_database_name(conn, cancel)
        tables = self.read_tables(conn, cancel)
        views = self.read_views(conn, cancel)
        return DatabaseSchema(
            database_name=database_name,
            extracted_at=extracted_at,
            tables=tables,
            views=views,
        )


def extract_database_schema(
    reader: CatalogReader,
    variant: EngineVariant,
    connection_string: str,
    cancel: CancelSignal | None = None,
) -> DatabaseSchema:
    """Connect to a database and read its schema with the given reader.

    Args:
        reader: Catalog reader configured for the engine
        variant: Engine the connection string addresses
        connection_string: SQLAlchemy URL or ``Key=Value;`` connection string
        cancel: Optional cancellation signal, checked before every query

    Returns:
        The extracted schema

    Raises:
        InputValidationError: If the connection string is blank or malformed
        DatabaseConnectionError: If the database cannot be reached or its driver is missing
        CatalogReadError: If a metadata query fails
        ExtractionCancelledError: If ``cancel`` is set during extraction
    """
    if connection_string is None or not connection_string.strip():
        raise InputValidationError("Connection string cannot be null or empty.")

    raise_if_cancelled(cancel)
    url = build_database_url(connection_string, variant)
    logger.info(f"Connecting to {variant.value} database: {sanitize_connection_string(connection_string)}")

    try:
        engine = create_database_engine(url, variant)
    except (NoSuchModuleError, ImportError) as e:
        raise DatabaseConnectionError(
            f"Database driver '{DRIVERS[variant]}' is not available ({e}). Install it with: {INSTALL_HINTS[variant]}"
        ) from e
    except ArgumentError as e:
        raise InputValidationError(f"Invalid connection settings: {e}") from e

    try:
        try:
            conn = engine.connect()
        except (DBAPIError, SQLAlchemyError) as e:
            raise DatabaseConnectionError(f"Could not connect to the {variant.value} database: {e}") from e

        with conn:
            schema = reader.read_schema(conn, cancel)

        logger.info(
            f"Read {len(schema.tables)} tables and {len(schema.views)} views from database {schema.database_name}"
        )
        return schema

    finally:
        engine.dispose()
