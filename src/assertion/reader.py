"""
Reads live tables and query results into Table values.
"""

import logging
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from src.binding.lob import LobConverter
from src.dataset.model import CellValue, Row, Table
from src.operation.sql_builder import SqlBuilder
from src.utils.database_types import DatabaseType
from src.utils.tracing import trace_database_query

logger = logging.getLogger(__name__)


class TableReader:
    """
    Fetches database contents as comparable Tables.

    LOB values are read into memory and binary values rendered as
    ``[BASE64]`` text while the cursor is open; the cursor is closed before
    the Table is returned.
    """

    def __init__(self, lob_converter: LobConverter | None = None):
        self.lob_converter = lob_converter or LobConverter()

    def read_table(
        self,
        connection: Any,
        table_name: str,
        columns: Sequence[str] | None = None,
        order_by: Sequence[str] | None = None,
    ) -> Table:
        """
        Read a table, optionally restricted to ``columns`` and sorted.

        Raises:
            ValueError: If a table or column name is not a valid identifier
        """
        dialect = DatabaseType.from_connection(connection)
        sql = SqlBuilder(dialect).select(table_name, columns, order_by)
        return self.read_query(connection, sql, table_name, dialect=dialect)

    def read_query(
        self,
        connection: Any,
        sql: str,
        table_name: str,
        parameters: Sequence[Any] | None = None,
        dialect: DatabaseType | None = None,
    ) -> Table:
        """
        Run a query and return its result as a Table named ``table_name``.

        Raises:
            LobConversionError: If a LOB value cannot be read
        """
        dialect = dialect or DatabaseType.from_connection(connection)

        with closing(connection.cursor()) as cursor:
            with trace_database_query("SELECT", table_name, dialect.value, sql):
                if parameters is None:
                    cursor.execute(sql)
                else:
                    cursor.execute(sql, tuple(parameters))
            columns = tuple(column[0] for column in cursor.description or ())
            rows = tuple(self._to_row(columns, record) for record in cursor.fetchall())

        logger.debug(f"Read {len(rows)} row(s) from {table_name}")
        return Table(table_name, columns, rows)

    def _to_row(self, columns: tuple[str, ...], record: Sequence[Any]) -> Row:
        return Row({
            column: CellValue.of(self.lob_converter.to_comparable(value))
            for column, value in zip(columns, record)
        })
