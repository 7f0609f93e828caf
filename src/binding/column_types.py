"""
Live column metadata lookup.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import closing
from typing import Any

from src.binding.sql_types import SqlTypeCategory, category_from_type_code, category_from_type_name
from src.utils.database_types import DatabaseType
from src.utils.sql_safety import validate_schema_table

logger = logging.getLogger(__name__)


class ColumnTypes(Mapping[str, SqlTypeCategory]):
    """
    Column name to type category, keyed case-insensitively.

    Keys are stored upper-cased; columns without metadata read as TEXT.
    """

    def __init__(self, types: Mapping[str, SqlTypeCategory] | None = None):
        self._types = {name.upper(): category for name, category in (types or {}).items()}

    def __getitem__(self, column: str) -> SqlTypeCategory:
        return self._types[column.upper()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._types)

    def __len__(self) -> int:
        return len(self._types)

    def category(self, column: str) -> SqlTypeCategory:
        return self._types.get(column.upper(), SqlTypeCategory.TEXT)

    def __repr__(self) -> str:
        return f"ColumnTypes({self._types!r})"


def column_types_from_description(description: Any) -> ColumnTypes:
    """Build ColumnTypes from a DB-API ``cursor.description``."""
    return ColumnTypes(
        {column[0]: category_from_type_code(column[1]) for column in description or ()}
    )


def _sqlite_table_info(cursor: Any, table_name: str) -> ColumnTypes:
    if "." in table_name:
        schema, table = table_name.split(".", 1)
        cursor.execute(f"PRAGMA {schema}.table_info({table})")
    else:
        cursor.execute(f"PRAGMA table_info({table_name})")
    # (cid, name, type, notnull, dflt_value, pk)
    return ColumnTypes({row[1]: category_from_type_name(row[2]) for row in cursor.fetchall()})


def read_column_types(
    connection: Any,
    table_name: str,
    dialect: DatabaseType | None = None,
) -> ColumnTypes:
    """
    Read the type category of every column of a live table.

    Uses a zero-row probe query and ``cursor.description``; SQLite reports no
    types there, so its declared types are read with ``PRAGMA table_info``.

    Args:
        connection: DB-API connection
        table_name: Table name, optionally schema-qualified
        dialect: Database dialect; detected from the connection when None

    Returns:
        ColumnTypes for the table

    Raises:
        ValueError: If the table name is not a valid identifier
    """
    validate_schema_table(table_name)
    dialect = dialect or DatabaseType.from_connection(connection)

    with closing(connection.cursor()) as cursor:
        if dialect == DatabaseType.SQLITE:
            types = _sqlite_table_info(cursor, table_name)
        else:
            cursor.execute(f"SELECT * FROM {table_name} WHERE 1=0")
            types = column_types_from_description(cursor.description)

    logger.debug(f"Column types for {table_name}: {dict(types)}")
    return types
