"""
UPDATE operation: rows are matched on the first column.
"""

import logging
from contextlib import closing
from typing import Any

from src.dataset.model import Table
from src.operation.base import TableOperation
from src.utils.database_types import DatabaseType

logger = logging.getLogger(__name__)


class UpdateOperation(TableOperation):
    """
    Updates every non-key column of each fixture row.

    The first column is the primary key. Tables with fewer than two columns
    have nothing to update and are skipped, as are rows with a NULL key.
    """

    statement_type = "UPDATE"

    def execute_table(self, table: Table, connection: Any, dialect: DatabaseType) -> int:
        if not table.rows:
            logger.debug(f"No rows to update in {table.name}")
            return 0
        if len(table.columns) < 2:
            logger.debug(f"Table {table.name} has no columns besides its key, skipping UPDATE")
            return 0

        key, *value_columns = table.columns
        sql = self.builder(dialect).update_by_key(table.name, table.columns)
        types = self.column_types(connection, table, dialect)
        parameter_order = [*value_columns, key]

        batch = [
            self.binder.bind_row(row, parameter_order, types)
            for row in table.rows
            if not row.get(key).is_null
        ]
        skipped = table.row_count - len(batch)
        if skipped:
            logger.debug(f"Skipped {skipped} row(s) of {table.name} with a NULL key")

        with closing(connection.cursor()) as cursor:
            return self.run_batch(cursor, sql, table, dialect, batch)
