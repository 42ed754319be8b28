"""SQLite schema extraction.

SQLite has no schemas in the SQL Server/PostgreSQL sense, so every table and
view is reported under the schema name ``sqlite``. Ordinal positions are the
0-based ``cid`` values from ``pragma_table_info``, and columns declared
without a type report the type ``any``.
"""

from dbdiff.extractors.base import CancelSignal
from dbdiff.extractors.catalog import CatalogQueries, CatalogReader, extract_database_schema
from dbdiff.models import DatabaseSchema, EngineVariant

SQLITE_SCHEMA_NAME = "sqlite"

SQLITE_CATALOG = CatalogQueries(
    database_name="SELECT name AS database_name FROM pragma_database_list WHERE seq = 0",
    tables=f"""
        SELECT
            '{SQLITE_SCHEMA_NAME}' AS schema_name,
            name AS object_name
        FROM sqlite_master
        WHERE type = 'table'
            AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'
        ORDER BY name
    """,
    views=f"""
        SELECT
            '{SQLITE_SCHEMA_NAME}' AS schema_name,
            name AS object_name,
            sql AS definition
        FROM sqlite_master
        WHERE type = 'view'
            AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\'
        ORDER BY name
    """,
    columns="""
        SELECT
            name AS column_name,
            COALESCE(NULLIF(type, ''), 'any') AS data_type,
            CASE WHEN "notnull" = 0 THEN 'YES' ELSE 'NO' END AS is_nullable,
            NULL AS character_maximum_length,
            NULL AS numeric_precision,
            NULL AS numeric_scale,
            cid AS ordinal_position
        FROM pragma_table_info(:object_name)
        ORDER BY cid
    """,
    column_binds=("object_name",),
)


class SqliteSchemaExtractor:
    """Extracts tables, views and columns from a SQLite database file"""

    variant = EngineVariant.SQLITE

    def __init__(self) -> None:
        self.reader = CatalogReader(SQLITE_CATALOG)

    def extract_schema(self, connection_string: str, cancel: CancelSignal | None = None) -> DatabaseSchema:
        return extract_database_schema(self.reader, self.variant, connection_string, cancel)
