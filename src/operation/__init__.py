"""
Transactional fixture operations.
"""

from collections.abc import Sequence
from typing import Any

from src.dataset.enums import Operation, TableOrderingStrategy
from src.dataset.model import Table
from src.ordering import resolve_order

from .base import TableOperation
from .delete import DeleteAllOperation, DeleteOperation
from .executor import OperationExecutor
from .insert import InsertOperation
from .preparation import prepare
from .refresh import RefreshOperation
from .sql_builder import SqlBuilder
from .truncate import TruncateOperation
from .update import UpdateOperation


def execute(
    operation: Operation | str,
    ordered_tables: Sequence[Table],
    connection: Any,
    strategy: TableOrderingStrategy | None = None,
    schema: str | None = None,
    load_order: Sequence[str] | None = None,
) -> None:
    """
    Execute ``operation`` over tables in one transaction.

    With a ``strategy`` the tables are ordered first; without one they are
    used in the order given.
    """
    tables = list(ordered_tables)
    if strategy is not None:
        tables = resolve_order(tables, connection, schema, strategy, load_order)
    OperationExecutor().execute(operation, tables, connection)


__all__ = [
    "execute",
    "prepare",
    "OperationExecutor",
    "SqlBuilder",
    "TableOperation",
    "InsertOperation",
    "UpdateOperation",
    "DeleteOperation",
    "DeleteAllOperation",
    "TruncateOperation",
    "RefreshOperation",
]
