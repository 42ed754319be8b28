"""PostgreSQL schema extraction."""

from dbdiff.extractors.base import CancelSignal
from dbdiff.extractors.catalog import CatalogQueries, CatalogReader, extract_database_schema
from dbdiff.models import DatabaseSchema, EngineVariant

POSTGRESQL_CATALOG = CatalogQueries(
    database_name="SELECT current_database() AS database_name",
    tables="""
        SELECT
            table_schema AS schema_name,
            table_name AS object_name
        FROM information_schema.tables
        WHERE table_type = 'BASE TABLE'
            AND table_schema NOT IN ('pg_catalog', 'information_schema')
            AND table_schema NOT LIKE 'pg\\_toast%'
            AND table_schema NOT LIKE 'pg\\_temp%'
        ORDER BY table_schema, table_name
    """,
    # pg_views.definition is NULL when the current role may not read the view
    views="""
        SELECT
            schemaname AS schema_name,
            viewname AS object_name,
            definition AS definition
        FROM pg_catalog.pg_views
        WHERE schemaname NOT IN ('pg_catalog', 'information_schema')
        ORDER BY schemaname, viewname
    """,
    columns="""
        SELECT
            c.column_name AS column_name,
            c.data_type AS data_type,
            c.is_nullable AS is_nullable,
            c.character_maximum_length AS character_maximum_length,
            c.numeric_precision AS numeric_precision,
            c.numeric_scale AS numeric_scale,
            c.ordinal_position AS ordinal_position
        FROM information_schema.columns c
        WHERE c.table_schema = :schema_name
            AND c.table_name = :object_name
        ORDER BY c.ordinal_position
    """,
)


class PostgreSqlSchemaExtractor:
    """Extracts tables, views and columns from PostgreSQL"""

    variant = EngineVariant.POSTGRESQL

    def __init__(self) -> None:
        self.reader = CatalogReader(POSTGRESQL_CATALOG)

    def extract_schema(self, connection_string: str, cancel: CancelSignal | None = None) -> DatabaseSchema:
        return extract_database_schema(self.reader, self.variant, connection_string, cancel)
