"""Exception types raised by the schema export pipeline."""


class DbDiffError(Exception):
    """Base class for all dbdiff errors"""


class InputValidationError(DbDiffError, ValueError):
    """A connection string, path, extension or config value is blank or malformed"""


class PathSecurityError(DbDiffError, PermissionError):
    """A path escapes its allowed base or points into a system directory.

    Always fatal. Raised before any I/O touches the path.
    """


class UnsupportedEngineError(DbDiffError, ValueError):
    """The engine token or variant is not one we can extract from"""


class DatabaseConnectionError(DbDiffError, ConnectionError):
    """The database is unreachable, rejected the credentials, or has no driver installed"""


class CatalogReadError(DbDiffError):
    """A catalog metadata query failed mid-extraction"""


class SchemaWriteError(DbDiffError, OSError):
    """The output directory or file could not be written"""


class ExtractionCancelledError(DbDiffError):
    """The caller's cancellation signal was set during extraction"""
