"""Deterministic text rendering of a database schema.

The output is meant to be diffed line by line, so for a given schema and
formatter settings it is always byte-identical:

- tables sorted by (schema, name), then views sorted by (schema, name)
- columns sorted by name; the ordinal position is shown, never used to sort
- ``\\n`` line endings and a fixed timestamp format

Example::

    DATABASE: Shop
    EXTRACTED: 2024-01-15T10:30:00.000Z

    TABLE: dbo.Users
      COLUMN: Id
        OrdinalPosition: 1
        Type: int
        Nullable: No
"""

import re
from typing import Protocol

from dbdiff.models import Column, DatabaseSchema

INDENT = "  "
COLUMN_INDENT = INDENT * 2
DEFINITION_INDENT = INDENT * 2

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class SchemaFormatter(Protocol):
    def format(self, schema: DatabaseSchema) -> str: ...


def format_timestamp(schema: DatabaseSchema) -> str:
    """Render the extraction time as ``YYYY-MM-DDTHH:MM:SS.fffZ`` in UTC."""
    extracted = schema.extracted_at
    return extracted.strftime("%Y-%m-%dT%H:%M:%S.") + f"{extracted.microsecond // 1000:03d}Z"


class CustomTextFormatter:
    """Formats a ``DatabaseSchema`` as sorted, indented plain text"""

    def __init__(self, include_ordinal_position: bool = True, include_view_definitions: bool = True) -> None:
        self.include_ordinal_position = include_ordinal_position
        self.include_view_definitions = include_view_definitions

    def _column_lines(self, column: Column) -> list[str]:
        lines = [f"{INDENT}COLUMN: {column.name}"]
        if self.include_ordinal_position:
            lines.append(f"{COLUMN_INDENT}OrdinalPosition: {column.ordinal_position}")
        lines.append(f"{COLUMN_INDENT}Type: {column.data_type}")
        lines.append(f"{COLUMN_INDENT}Nullable: {'Yes' if column.is_nullable else 'No'}")
        if column.max_length is not None:
            lines.append(f"{COLUMN_INDENT}MaxLength: {column.max_length}")
        if column.precision is not None:
            lines.append(f"{COLUMN_INDENT}Precision: {column.precision}")
        if column.scale is not None:
            lines.append(f"{COLUMN_INDENT}Scale: {column.scale}")
        return lines

    def _columns_block(self, columns: tuple[Column, ...]) -> list[str]:
        lines = []
        for column in sorted(columns, key=lambda c: c.name):
            lines.extend(self._column_lines(column))
        return lines

    def format(self, schema: DatabaseSchema) -> str:
        """Render ``schema`` as text.

        Args:
            schema: The schema to render

        Returns:
            The formatted text, ending with a newline
        """
        lines = [
            f"DATABASE: {schema.database_name}",
            f"EXTRACTED: {format_timestamp(schema)}",
            "",
        ]

        for table in sorted(schema.tables, key=lambda t: (t.schema_name, t.table_name)):
            lines.append(f"TABLE: {table.full_name}")
            lines.extend(self._columns_block(table.columns))
            lines.append("")

        for view in sorted(schema.views, key=lambda v: (v.schema_name, v.view_name)):
            lines.append(f"VIEW: {view.full_name}")
            if self.include_view_definitions and view.definition is not None:
                lines.append(f"{INDENT}DEFINITION:")
                lines.extend(f"{DEFINITION_INDENT}{line}" for line in _LINE_BREAK.split(view.definition))
            lines.extend(self._columns_block(view.columns))
            lines.append("")

        return "\n".join(lines) + "\n"
