"""Schema extraction from SQL Server, PostgreSQL and SQLite.

This package resolves which engine a connection string targets, connects
through SQLAlchemy, and reads table, view and column metadata from the
engine's catalog into the engine-independent model.
"""

from dbdiff.extractors.base import CancelSignal, SchemaExtractor
from dbdiff.extractors.catalog import CatalogQueries, CatalogReader, extract_database_schema
from dbdiff.extractors.engine import build_database_url, create_database_engine, sanitize_connection_string
from dbdiff.extractors.factory import SchemaExtractorFactory
from dbdiff.extractors.postgresql import PostgreSqlSchemaExtractor
from dbdiff.extractors.resolver import resolve_engine
from dbdiff.extractors.sqlite import SqliteSchemaExtractor
from dbdiff.extractors.sqlserver import SqlServerSchemaExtractor

__all__ = [
    # Interfaces
    "CancelSignal",
    "SchemaExtractor",
    # Engine
    "build_database_url",
    "create_database_engine",
    "sanitize_connection_string",
    # Catalog
    "CatalogQueries",
    "CatalogReader",
    "extract_database_schema",
    # Extractors
    "PostgreSqlSchemaExtractor",
    "SqlServerSchemaExtractor",
    "SqliteSchemaExtractor",
    # Selection
    "SchemaExtractorFactory",
    "resolve_engine",
]
