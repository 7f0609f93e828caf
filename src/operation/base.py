"""
Shared machinery for table-level write operations.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from prometheus_client import Counter

from src.binding.binder import ParameterBinder
from src.binding.column_types import ColumnTypes, read_column_types
from src.dataset.model import Table
from src.operation.sql_builder import SqlBuilder
from src.utils.database_types import DatabaseType
from src.utils.errors import DatabaseOperationError
from src.utils.metrics import get_or_create_metric
from src.utils.tracing import trace_database_query

logger = logging.getLogger(__name__)

ROWS_WRITTEN = get_or_create_metric(
    lambda: Counter(
        "dbfixture_rows_written_total",
        "Rows sent to the database by fixture statements",
        ["table", "statement"],
    ),
    "dbfixture_rows_written_total",
)

ColumnTypeReader = Callable[[Any, str, DatabaseType], ColumnTypes]


class TableOperation:
    """
    One kind of write applied table by table.

    Subclasses implement ``execute_table``. Failures are wrapped in
    DatabaseOperationError naming the table; transaction handling belongs
    to the caller.
    """

    statement_type = "UNKNOWN"

    def __init__(
        self,
        binder: ParameterBinder | None = None,
        column_type_reader: ColumnTypeReader = read_column_types,
    ):
        self.binder = binder or ParameterBinder()
        self.column_type_reader = column_type_reader

    def execute(self, tables: Sequence[Table], connection: Any, dialect: DatabaseType) -> int:
        """
        Apply the operation to each table in order.

        Returns:
            Number of rows sent to the database

        Raises:
            DatabaseOperationError: On the first failing table
        """
        total = 0
        for table in tables:
            try:
                total += self.execute_table(table, connection, dialect)
            except DatabaseOperationError:
                raise
            except Exception as e:
                raise DatabaseOperationError(
                    f"{self.statement_type} failed for table {table.name}: {e}",
                    table=table.name,
                ) from e
        return total

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        raise NotImplementedError

    def column_types(self, connection: Any, table: Table, dialect: DatabaseType) -> ColumnTypes:
        return self.column_type_reader(connection, table.name, dialect)

    def run(
        self,
        cursor: Any,
        sql: str,
        table: Table,
        dialect: DatabaseType,
        parameters: Sequence[Any] | None = None,
        statement_type: str | None = None,
    ) -> int:
        """Execute one statement and return the driver's row count."""
        statement_type = statement_type or self.statement_type
        logger.debug(f"{statement_type} {table.name}: {sql} {list(parameters or ())}")
        with trace_database_query(statement_type, table.name, dialect.value, sql):
            if parameters is None:
                cursor.execute(sql)
            else:
                cursor.execute(sql, tuple(parameters))
        return cursor.rowcount

    def run_batch(
        self,
        cursor: Any,
        sql: str,
        table: Table,
        dialect: DatabaseType,
        batch: list[tuple[Any, ...]],
        statement_type: str | None = None,
    ) -> int:
        """Execute one statement for every parameter tuple in ``batch``."""
        if not batch:
            return 0
        statement_type = statement_type or self.statement_type
        logger.debug(f"{statement_type} {table.name}: {sql} x{len(batch)}")
        with trace_database_query(statement_type, table.name, dialect.value, sql):
            cursor.executemany(sql, batch)
        ROWS_WRITTEN.labels(table=table.name, statement=statement_type).inc(len(batch))
        return len(batch)

    @staticmethod
    def builder(dialect: DatabaseType) -> SqlBuilder:
        return SqlBuilder(dialect)
