"""Pick the database engine for a connection string.

Resolution order is fixed:

1. an explicit engine token, when one is given
2. the URL scheme, for SQLAlchemy-style URLs
3. PostgreSQL keys (``Host``, ``Username``)
4. SQL Server keys (``Server``, ``Data Source``, ``Initial Catalog``,
   ``Integrated Security``, ``Trusted_Connection``)
5. SQL Server, with a warning

Only keys are inspected, never values. A ``Key=Value;`` string that carries
keys from both steps 3 and 4 resolves to PostgreSQL purely because step 3 is
checked first.
"""

import logging

from dbdiff.extractors.engine import is_url, parse_key_value_connection_string
from dbdiff.models import EngineVariant

logger = logging.getLogger(__name__)

POSTGRESQL_KEYS = ("host", "username")
SQLSERVER_KEYS = ("server", "data source", "initial catalog", "integrated security", "trusted_connection")

URL_SCHEMES = {
    "sqlite": EngineVariant.SQLITE,
    "postgresql": EngineVariant.POSTGRESQL,
    "postgres": EngineVariant.POSTGRESQL,
    "mssql": EngineVariant.SQLSERVER,
}


def _engine_from_url(connection_string: str) -> EngineVariant | None:
    scheme = connection_string.strip().split("://", 1)[0].lower()
    backend = scheme.split("+", 1)[0]
    return URL_SCHEMES.get(backend)


def resolve_engine(connection_string: str, database_type: str | None = None) -> EngineVariant:
    """Determine which engine a connection string targets.

    Args:
        connection_string: SQLAlchemy URL or ``Key=Value;`` connection string
        database_type: Optional explicit engine token; wins when present

    Returns:
        The resolved engine variant

    Raises:
        UnsupportedEngineError: If ``database_type`` is given but unknown
    """
    if database_type is not None and database_type.strip():
        variant = EngineVariant.parse(database_type)
        logger.debug(f"Using explicitly requested database type: {variant.value}")
        return variant

    if is_url(connection_string):
        variant = _engine_from_url(connection_string)
        if variant is not None:
            logger.debug(f"Detected database type {variant.value} from URL scheme")
            return variant

    keys = parse_key_value_connection_string(connection_string).keys()

    if any(key in keys for key in POSTGRESQL_KEYS):
        logger.debug("Detected PostgreSQL connection string")
        return EngineVariant.POSTGRESQL

    if any(key in keys for key in SQLSERVER_KEYS):
        logger.debug("Detected SQL Server connection string")
        return EngineVariant.SQLSERVER

    logger.warning("Could not detect the database type from the connection string; defaulting to SQL Server")
    return EngineVariant.SQLSERVER
