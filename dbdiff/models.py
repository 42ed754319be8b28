"""Engine-independent schema model shared by extractors and the formatter"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dbdiff.errors import UnsupportedEngineError

# ============================================================================
# Engine Variants
# ============================================================================


class EngineVariant(str, Enum):
    """Database engines a schema can be extracted from"""

    SQLSERVER = "sqlserver"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def parse(cls, token: str) -> "EngineVariant":
        """Parse an engine token such as ``SqlServer`` or ``postgres``.

        Args:
            token: Engine name, matched case-insensitively (aliases allowed)

        Returns:
            The matching engine variant

        Raises:
            UnsupportedEngineError: If the token names no known engine
        """
        key = token.strip().lower()
        variant = _ENGINE_ALIASES.get(key)
        if variant is None:
            known = ", ".join(sorted(_ENGINE_ALIASES))
            raise UnsupportedEngineError(f"Unsupported database type: '{token}'. Expected one of: {known}")
        return variant


_ENGINE_ALIASES = {
    "sqlserver": EngineVariant.SQLSERVER,
    "mssql": EngineVariant.SQLSERVER,
    "postgresql": EngineVariant.POSTGRESQL,
    "postgres": EngineVariant.POSTGRESQL,
    "pgsql": EngineVariant.POSTGRESQL,
    "sqlite": EngineVariant.SQLITE,
}


def _require_text(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what} cannot be empty")
    return value


# ============================================================================
# Schema Objects
# ============================================================================


class DataType(BaseModel):
    """Column type name, normalized to lower case.

    Two data types are equal when their names match ignoring case:

        >>> DataType("INT") == DataType("int")
        True
    """

    model_config = ConfigDict(frozen=True)

    type_name: str = Field(description="Lower-cased type name as reported by the engine")

    def __init__(self, type_name: str, **data: Any) -> None:
        super().__init__(type_name=type_name, **data)

    @field_validator("type_name")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return _require_text(value, "Type name").lower()

    def __str__(self) -> str:
        return self.type_name


class Column(BaseModel):
    """A table or view column"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Column name")
    data_type: DataType = Field(description="Normalized column type")
    is_nullable: bool = Field(description="Whether the column accepts NULL")
    ordinal_position: int = Field(description="Column position as reported by the engine")
    max_length: int | None = Field(default=None, description="Character maximum length, if the engine reports one")
    precision: int | None = Field(default=None, description="Numeric precision, if the engine reports one")
    scale: int | None = Field(default=None, description="Numeric scale, if the engine reports one")

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        return _require_text(value, "Column name")

    @field_validator("data_type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return DataType(value)
        return value


class Table(BaseModel):
    """A base table and its columns"""

    model_config = ConfigDict(frozen=True)

    schema_name: str
    table_name: str
    columns: tuple[Column, ...] = ()

    @field_validator("schema_name")
    @classmethod
    def _check_schema(cls, value: str) -> str:
        return _require_text(value, "Schema name")

    @field_validator("table_name")
    @classmethod
    def _check_table(cls, value: str) -> str:
        return _require_text(value, "Table name")

    @property
    def full_name(self) -> str:
        return f"{self.schema_name}.{self.table_name}"


class View(BaseModel):
    """A view, its columns and (when retrievable) its SQL definition"""

    model_config = ConfigDict(frozen=True)

    schema_name: str
    view_name: str
    columns: tuple[Column, ...] = ()
    definition: str | None = Field(default=None, description="View SQL, None when encrypted or unavailable")

    @field_validator("schema_name")
    @classmethod
    def _check_schema(cls, value: str) -> str:
        return _require_text(value, "Schema name")

    @field_validator("view_name")
    @classmethod
    def _check_view(cls, value: str) -> str:
        return _require_text(value, "View name")

    @property
    def full_name(self) -> str:
        return f"{self.schema_name}.{self.view_name}"


class DatabaseSchema(BaseModel):
    """Everything extracted from one database in one run"""

    model_config = ConfigDict(frozen=True)

    database_name: str
    extracted_at: datetime = Field(description="UTC instant at which extraction started")
    tables: tuple[Table, ...] = ()
    views: tuple[View, ...] = ()

    @field_validator("database_name")
    @classmethod
    def _check_database(cls, value: str) -> str:
        return _require_text(value, "Database name")

    @field_validator("extracted_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        # Naive timestamps are taken to be UTC already
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
