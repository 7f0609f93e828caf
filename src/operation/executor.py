"""
Transactional operation executor.

Runs one Operation over an ordered list of tables inside a single
transaction: everything is committed, or everything is rolled back and a
DatabaseOperationError is raised.
"""

import logging
import time
from collections.abc import Sequence
from contextlib import closing
from typing import Any

from prometheus_client import Counter, Histogram

from src.binding.binder import ParameterBinder
from src.dataset.enums import Operation
from src.dataset.model import Table
from src.operation.base import TableOperation
from src.operation.delete import DeleteAllOperation, DeleteOperation
from src.operation.insert import InsertOperation
from src.operation.refresh import RefreshOperation
from src.operation.truncate import TruncateOperation
from src.operation.update import UpdateOperation
from src.utils.database_types import DatabaseType
from src.utils.errors import DatabaseOperationError
from src.utils.logging import ContextLogger
from src.utils.metrics import get_or_create_metric
from src.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

OPERATIONS_TOTAL = get_or_create_metric(
    lambda: Counter(
        "dbfixture_operations_total",
        "Fixture operations executed",
        ["operation", "status"],
    ),
    "dbfixture_operations_total",
)

OPERATION_DURATION = get_or_create_metric(
    lambda: Histogram(
        "dbfixture_operation_duration_seconds",
        "Time to execute a fixture operation",
        ["operation"],
        buckets=[0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0, 30.0],
    ),
    "dbfixture_operation_duration_seconds",
)

# Each step is (table operation name, run over tables in reverse order)
STEPS: dict[Operation, tuple[tuple[str, bool], ...]] = {
    Operation.NONE: (),
    Operation.INSERT: (("insert", False),),
    Operation.UPDATE: (("update", False),),
    Operation.DELETE: (("delete", False),),
    Operation.DELETE_ALL: (("delete_all", False),),
    Operation.REFRESH: (("refresh", False),),
    Operation.TRUNCATE_TABLE: (("truncate", False),),
    Operation.CLEAN_INSERT: (("delete_all", True), ("insert", False)),
    Operation.TRUNCATE_INSERT: (("truncate", True), ("insert", False)),
}


class OperationExecutor:
    """
    Executes fixture operations against a DB-API connection.

    The executor owns the transaction for the duration of ``execute``;
    callers must not write through the same connection meanwhile.
    """

    def __init__(self, binder: ParameterBinder | None = None, **table_operations: TableOperation):
        binder = binder or ParameterBinder()
        self.table_operations: dict[str, TableOperation] = {
            "insert": InsertOperation(binder),
            "update": UpdateOperation(binder),
            "delete": DeleteOperation(binder),
            "delete_all": DeleteAllOperation(binder),
            "truncate": TruncateOperation(binder),
            "refresh": RefreshOperation(binder),
        }
        unknown = set(table_operations) - set(self.table_operations)
        if unknown:
            raise TypeError(f"Unknown table operations: {sorted(unknown)}")
        self.table_operations.update(table_operations)

    def execute(
        self,
        operation: Operation | str,
        tables: Sequence[Table],
        connection: Any,
        dialect: DatabaseType | None = None,
    ) -> None:
        """
        Execute ``operation`` over ``tables`` in one transaction.

        Args:
            operation: Operation to run
            tables: Tables in dependency order (parents first)
            connection: DB-API connection
            dialect: Database dialect; detected from the connection when None

        Raises:
            DatabaseOperationError: If any statement fails; the transaction
                has been rolled back and the driver error is chained
        """
        operation = Operation.parse(operation)
        tables = list(tables)
        log = ContextLogger(__name__, operation=operation.value)

        if operation == Operation.NONE or not tables:
            log.debug(f"Nothing to execute for {operation.value} ({len(tables)} tables)")
            return

        dialect = dialect or DatabaseType.from_connection(connection)
        start_time = time.monotonic()
        restore_autocommit = self._begin(connection, dialect)

        try:
            with trace_operation(
                "fixture.execute",
                operation=operation.value,
                tables=len(tables),
                dialect=dialect.value,
            ):
                rows = self._run_steps(operation, tables, connection, dialect, log)
            connection.commit()
        except Exception as e:
            self._rollback(connection, log)
            OPERATIONS_TOTAL.labels(operation=operation.value, status="failure").inc()
            cause = self._cause(e)
            raise self._wrap(operation, e, cause) from cause
        finally:
            if restore_autocommit:
                connection.autocommit = True

        duration = time.monotonic() - start_time
        OPERATIONS_TOTAL.labels(operation=operation.value, status="success").inc()
        OPERATION_DURATION.labels(operation=operation.value).observe(duration)
        log.info(
            f"Executed {operation.value} on {len(tables)} table(s) in {duration:.3f}s",
            rows=rows,
        )

    def _run_steps(
        self,
        operation: Operation,
        tables: list[Table],
        connection: Any,
        dialect: DatabaseType,
        log: ContextLogger,
    ) -> int:
        rows = 0
        for name, reverse in STEPS[operation]:
            step_tables = tables[::-1] if reverse else tables
            log.debug(f"Running {name} on {[t.name for t in step_tables]}")
            rows += self.table_operations[name].execute(step_tables, connection, dialect)
        return rows

    @staticmethod
    def _begin(connection: Any, dialect: DatabaseType) -> bool:
        """
        Open the transaction the operation runs in.

        Returns:
            True if auto-commit was switched off and must be restored
        """
        if getattr(connection, "autocommit", False) is True:
            connection.autocommit = False
            return True

        # sqlite3 with isolation_level=None never begins a transaction on its own
        if (
            dialect == DatabaseType.SQLITE
            and getattr(connection, "isolation_level", "") is None
            and not getattr(connection, "in_transaction", False)
        ):
            with closing(connection.cursor()) as cursor:
                cursor.execute("BEGIN")
        return False

    @staticmethod
    def _rollback(connection: Any, log: ContextLogger) -> None:
        try:
            connection.rollback()
        except Exception as rollback_error:
            log.error(f"Rollback failed: {rollback_error}", exc_info=True)

    @staticmethod
    def _cause(error: Exception) -> BaseException:
        if isinstance(error, DatabaseOperationError) and error.__cause__ is not None:
            return error.__cause__
        return error

    @staticmethod
    def _wrap(
        operation: Operation,
        error: Exception,
        cause: BaseException,
    ) -> DatabaseOperationError:
        table = getattr(error, "table", None)
        row_index = getattr(error, "row_index", None)

        message = f"Failed to execute operation {operation.value}"
        if table:
            message += f" on table {table}"
        if row_index is not None:
            message += f" at row {row_index}"
        message += f": {cause}"

        return DatabaseOperationError(message, operation=operation, table=table, row_index=row_index)
