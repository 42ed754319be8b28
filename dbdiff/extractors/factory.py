"""Mapping from engine variant to schema extractor."""

from dbdiff.errors import UnsupportedEngineError
from dbdiff.extractors.base import SchemaExtractor
from dbdiff.extractors.postgresql import PostgreSqlSchemaExtractor
from dbdiff.extractors.sqlite import SqliteSchemaExtractor
from dbdiff.extractors.sqlserver import SqlServerSchemaExtractor
from dbdiff.models import EngineVariant

EXTRACTORS: dict[EngineVariant, type[SchemaExtractor]] = {
    EngineVariant.SQLSERVER: SqlServerSchemaExtractor,
    EngineVariant.POSTGRESQL: PostgreSqlSchemaExtractor,
    EngineVariant.SQLITE: SqliteSchemaExtractor,
}


class SchemaExtractorFactory:
    """Creates a fresh extractor for each request; holds no state"""

    def create_extractor(self, variant: EngineVariant) -> SchemaExtractor:
        """Return an extractor for ``variant``.

        Raises:
            UnsupportedEngineError: If no extractor exists for the variant
        """
        extractor_cls = EXTRACTORS.get(variant)
        if extractor_cls is None:
            raise UnsupportedEngineError(f"Unsupported database type: {variant}")
        return extractor_cls()
