"""
Table ordering for fixture operations.

Applies a TableOrderingStrategy to a list of tables. Foreign key ordering
degrades to the original order when metadata cannot be read, so a broken
metadata query never produces a partially sorted, unsafe order.
"""

import logging
from collections.abc import Sequence
from typing import Any

from prometheus_client import Counter

from src.dataset.enums import TableOrderingStrategy
from src.dataset.model import Table
from src.ordering.dependencies import ForeignKeyDependencyExtractor, split_table_name
from src.ordering.topological import topological_sort
from src.utils.errors import ForeignKeyMetadataError
from src.utils.metrics import get_or_create_metric
from src.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

DEPENDENCY_RESOLUTION_FAILURES = get_or_create_metric(
    lambda: Counter(
        "dbfixture_dependency_resolution_failures_total",
        "Foreign key resolutions that fell back to the original table order",
    ),
    "dbfixture_dependency_resolution_failures_total",
)


def _fold(name: str) -> str:
    return split_table_name(name)[1].casefold()


class TableOrderResolver:
    """Orders tables according to a TableOrderingStrategy."""

    def __init__(self, extractor: ForeignKeyDependencyExtractor | None = None):
        self.extractor = extractor or ForeignKeyDependencyExtractor()

    def resolve_order(
        self,
        tables: Sequence[Table],
        connection: Any,
        schema: str | None = None,
        strategy: TableOrderingStrategy = TableOrderingStrategy.FOREIGN_KEY,
        load_order: Sequence[str] | None = None,
    ) -> list[Table]:
        """
        Order tables for writing.

        Args:
            tables: Tables in their original order
            connection: DB-API connection used for foreign key metadata
            schema: Schema of unqualified table names
            strategy: Ordering strategy
            load_order: Externally supplied table order (a load order file)

        Returns:
            A new list of the same Table objects
        """
        tables = list(tables)
        if len(tables) <= 1:
            return tables

        with trace_operation("fixture.resolve_order", strategy=strategy.value, tables=len(tables)):
            if strategy == TableOrderingStrategy.ALPHABETICAL:
                ordered = self.order_alphabetically(tables)
            elif strategy == TableOrderingStrategy.LOAD_ORDER_FILE:
                ordered = self.order_by_load_order(tables, load_order)
            elif strategy == TableOrderingStrategy.AUTO and load_order:
                ordered = self.order_by_load_order(tables, load_order)
            else:
                ordered = self.order_by_foreign_keys(tables, connection, schema)

        logger.debug(f"Resolved table order ({strategy.value}): {[t.name for t in ordered]}")
        return ordered

    def order_by_foreign_keys(
        self,
        tables: list[Table],
        connection: Any,
        schema: str | None = None,
    ) -> list[Table]:
        """Parents before children; the original order if metadata fails."""
        names = [table.name for table in tables]
        try:
            dependencies = self.extractor.extract(names, connection, schema)
        except ForeignKeyMetadataError as e:
            logger.warning(f"Foreign key resolution failed, using original table order: {e}")
            DEPENDENCY_RESOLUTION_FAILURES.inc()
            return list(tables)

        if not dependencies:
            return list(tables)

        by_name = {table.name: table for table in tables}
        return [by_name[name] for name in topological_sort(names, dependencies)]

    @staticmethod
    def order_alphabetically(tables: list[Table]) -> list[Table]:
        return sorted(tables, key=lambda table: (table.name.casefold(), table.name))

    @staticmethod
    def order_by_load_order(tables: list[Table], load_order: Sequence[str] | None) -> list[Table]:
        """
        Follow an external load order.

        Listed tables come first in list order; unlisted tables follow in
        their original order. Listed names without a table are ignored.
        """
        if not load_order:
            return list(tables)

        position: dict[str, int] = {}
        for index, name in enumerate(load_order):
            position.setdefault(_fold(name), index)

        listed = sorted(
            (table for table in tables if _fold(table.name) in position),
            key=lambda table: position[_fold(table.name)],
        )
        unlisted = [table for table in tables if _fold(table.name) not in position]
        return listed + unlisted
