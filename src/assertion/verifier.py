"""
Expectation verification against a live database.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from src.assertion.comparator import DataSetComparator, FailureHandler
from src.assertion.reader import TableReader
from src.assertion.result import ComparisonResult
from src.assertion.strategy import ColumnStrategies, ComparisonStrategy, StrategySource
from src.dataset.config import Configuration
from src.dataset.model import DataSet, Table
from src.utils.tracing import trace_operation

logger = logging.getLogger(__name__)


class ExpectationVerifier:
    """Compares expected data sets and query results with database contents."""

    def __init__(
        self,
        reader: TableReader | None = None,
        comparator: DataSetComparator | None = None,
    ):
        self.reader = reader or TableReader()
        self.comparator = comparator or DataSetComparator()

    def verify(
        self,
        expected: DataSet,
        connection: Any,
        configuration: Configuration | None = None,
        column_strategies: StrategySource = None,
        failure_handler: FailureHandler | None = None,
        order_by: Mapping[str, Sequence[str]] | None = None,
    ) -> ComparisonResult:
        """
        Verify every expected table against the database.

        Expected rows are filtered to the configured scenarios and the
        global exclude columns are dropped. Each live table is read in full
        and projected onto the expected columns, so columns the database
        lacks are reported rather than failing the query. All tables are
        compared before anything is raised.

        Args:
            expected: Expected data
            connection: DB-API connection
            configuration: Settings; defaults when None
            column_strategies: Strategies overriding the configured ones
            failure_handler: Receives the report instead of an exception
            order_by: Table name to ORDER BY columns for reading

        Returns:
            The comparison result

        Raises:
            ComparisonAssertionError: If anything differs and no failure
                handler was given
        """
        configuration = configuration or Configuration()
        strategies = ColumnStrategies(configuration.column_strategies).merged(column_strategies)
        expected = expected.filter_scenarios(
            configuration.scenario_names, configuration.scenario_marker
        ).exclude_columns(configuration.global_exclude_columns)

        result = ComparisonResult()
        with trace_operation("fixture.verify", tables=len(expected)):
            for table in expected:
                ordering = self._ordering_for(order_by, table.name)
                actual = self.reader.read_table(connection, table.name, order_by=ordering)
                actual = actual.select_columns(table.columns)
                self.comparator.compare_tables(table, actual, strategies, result=result)

        logger.info(
            f"Verified {len(expected)} table(s): {result.difference_count} difference(s)"
        )
        self.comparator.report(result, failure_handler)
        return result

    def assert_equals_by_query(
        self,
        expected: Table,
        connection: Any,
        sql: str,
        table_name: str | None = None,
        ignore_columns: Iterable[str] = (),
        column_strategies: StrategySource = None,
        failure_handler: FailureHandler | None = None,
        parameters: Sequence[Any] | None = None,
    ) -> ComparisonResult:
        """
        Compare a query result with an expected table.

        Columns in ``ignore_columns`` are compared with IGNORE.

        Raises:
            ComparisonAssertionError: If anything differs and no failure
                handler was given
        """
        actual = self.reader.read_query(
            connection, sql, table_name or expected.name, parameters=parameters
        )
        strategies = ColumnStrategies(column_strategies).merged(
            {column: ComparisonStrategy.IGNORE for column in ignore_columns}
        )
        result = self.comparator.compare_tables(expected, actual, strategies)
        self.comparator.report(result, failure_handler)
        return result

    @staticmethod
    def _ordering_for(order_by: Mapping[str, Sequence[str]] | None, table_name: str):
        if not order_by:
            return None
        folded = table_name.casefold()
        for name, columns in order_by.items():
            if name.casefold() == folded:
                return list(columns)
        return None
