"""SQL Server schema extraction."""

from dbdiff.extractors.base import CancelSignal
from dbdiff.extractors.catalog import CatalogQueries, CatalogReader, extract_database_schema
from dbdiff.models import DatabaseSchema, EngineVariant

SQLSERVER_CATALOG = CatalogQueries(
    database_name="SELECT DB_NAME() AS database_name",
    tables="""
        SELECT
            TABLE_SCHEMA AS schema_name,
            TABLE_NAME AS object_name
        FROM INFORMATION_SCHEMA.TABLES
        WHERE TABLE_TYPE = 'BASE TABLE'
            AND TABLE_SCHEMA NOT IN ('sys', 'INFORMATION_SCHEMA')
        ORDER BY TABLE_SCHEMA, TABLE_NAME
    """,
    # sys.sql_modules holds the full definition; INFORMATION_SCHEMA.VIEWS cuts it at 4000 chars
    views="""
        SELECT
            s.name AS schema_name,
            v.name AS object_name,
            m.definition AS definition
        FROM sys.views v
        INNER JOIN sys.schemas s ON v.schema_id = s.schema_id
        LEFT JOIN sys.sql_modules m ON v.object_id = m.object_id
        WHERE s.name NOT IN ('sys', 'INFORMATION_SCHEMA')
        ORDER BY s.name, v.name
    """,
    columns="""
        SELECT
            c.COLUMN_NAME AS column_name,
            c.DATA_TYPE AS data_type,
            c.IS_NULLABLE AS is_nullable,
            c.CHARACTER_MAXIMUM_LENGTH AS character_maximum_length,
            c.NUMERIC_PRECISION AS numeric_precision,
            c.NUMERIC_SCALE AS numeric_scale,
            c.ORDINAL_POSITION AS ordinal_position
        FROM INFORMATION_SCHEMA.COLUMNS c
        WHERE c.TABLE_SCHEMA = :schema_name
            AND c.TABLE_NAME = :object_name
        ORDER BY c.ORDINAL_POSITION
    """,
)


class SqlServerSchemaExtractor:
    """Extracts tables, views and columns from Microsoft SQL Server"""

    variant = EngineVariant.SQLSERVER

    def __init__(self) -> None:
        self.reader = CatalogReader(SQLSERVER_CATALOG)

    def extract_schema(self, connection_string: str, cancel: CancelSignal | None = None) -> DatabaseSchema:
        return extract_database_schema(self.reader, self.variant, connection_string, cancel)
