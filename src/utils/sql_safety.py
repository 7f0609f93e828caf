"""
SQL safety utilities for preventing SQL injection.

Table and column names taken from fixture data end up inside generated DML,
so every one of them is validated before a statement is built. Names are
emitted unquoted to let the database apply its own case folding.
"""

import re
from collections.abc import Iterable


# Strict ASCII-only patterns for SQL identifiers
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_$]*$")
VALID_SCHEMA_TABLE = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_$]*(\.[a-zA-Z_][a-zA-Z0-9_$]*)?$"
)


def validate_identifier(identifier: str) -> str:
    """
    Validate a SQL identifier (column name, savepoint name, etc.).

    Args:
        identifier: The identifier to validate

    Returns:
        The identifier, unchanged

    Raises:
        ValueError: If the identifier contains invalid characters
    """
    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not VALID_IDENTIFIER.match(identifier):
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "Only ASCII letters, digits, underscores and '$' are allowed, "
            "and must start with a letter or underscore."
        )
    return identifier


def validate_schema_table(schema_table: str) -> str:
    """
    Validate a table name, optionally qualified as schema.table.

    Args:
        schema_table: The table identifier to validate

    Returns:
        The identifier, unchanged

    Raises:
        ValueError: If the identifier format is invalid
    """
    if not schema_table:
        raise ValueError("Table identifier cannot be empty")

    if not VALID_SCHEMA_TABLE.match(schema_table):
        raise ValueError(
            f"Invalid table identifier: {schema_table!r}. "
            "Only ASCII letters, digits, underscores and '$' are allowed."
        )
    return schema_table


def validate_identifiers(identifiers: Iterable[str]) -> list[str]:
    """Validate a sequence of column names, returning them as a list."""
    return [validate_identifier(identifier) for identifier in identifiers]


def qualify_table(table_name: str, schema: str | None = None) -> str:
    """
    Build a validated table reference, prefixing the schema when given.

    A name that is already qualified keeps its own schema.

    Raises:
        ValueError: If either part is not a valid identifier
    """
    validate_schema_table(table_name)
    if schema and "." not in table_name:
        validate_identifier(schema)
        return f"{schema}.{table_name}"
    return table_name
