"""
INSERT operation: batched parameterized inserts per table.
"""

import logging
from contextlib import closing
from typing import Any

from src.binding.column_types import ColumnTypes
from src.dataset.model import Row, Table
from src.operation.base import ROWS_WRITTEN, TableOperation
from src.utils.database_types import DatabaseType

logger = logging.getLogger(__name__)


class InsertOperation(TableOperation):
    """Inserts every fixture row; tables without rows are skipped."""

    statement_type = "INSERT"

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        if not table.rows:
            logger.debug(f"No rows to insert into {table.name}")
            return 0

        sql = self.builder(dialect).insert(table.name, table.columns)
        types = self.column_types(connection, table, dialect)
        batch = [self.binder.bind_row(row, table.columns, types) for row in table.rows]

        with closing(connection.cursor()) as cursor:
            return self.run_batch(cursor, sql, table, dialect, batch)

    def insert_row(
        self,
        cursor: Any,
        table: Table,
        row: Row,
        types: ColumnTypes,
        dialect: DatabaseType,
    ) -> None:
        """Insert a single row through an open cursor."""
        sql = self.builder(dialect).insert(table.name, table.columns)
        self.run(cursor, sql, table, dialect, self.binder.bind_row(row, table.columns, types),
                 statement_type="INSERT")
        ROWS_WRITTEN.labels(table=table.name, statement="INSERT").inc()
