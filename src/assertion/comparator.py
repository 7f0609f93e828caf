"""
Table and data set comparison.

Rows are matched by position. Every check runs to completion and records
its differences in one ComparisonResult, so a single failure reports the
complete diff.
"""

import logging
from collections.abc import Callable, Iterable

from prometheus_client import Counter

from src.assertion.result import ComparisonResult
from src.assertion.strategy import ColumnStrategies, ComparisonStrategy, StrategySource, StrategyType
from src.dataset.model import DataSet, Table
from src.utils.errors import ComparisonAssertionError
from src.utils.metrics import get_or_create_metric

logger = logging.getLogger(__name__)

ASSERTION_DIFFERENCES = get_or_create_metric(
    lambda: Counter(
        "dbfixture_assertion_differences_total",
        "Differences found by fixture comparisons",
        ["kind"],
    ),
    "dbfixture_assertion_differences_total",
)

# Receives the report text and the result instead of an exception being raised
FailureHandler = Callable[[str, ComparisonResult], None]


class DataSetComparator:
    """Compares expected and actual tables column by column."""

    def compare_data_sets(
        self,
        expected: DataSet,
        actual: DataSet,
        column_strategies: StrategySource = None,
        result: ComparisonResult | None = None,
    ) -> ComparisonResult:
        """
        Compare every expected table with the actual table of the same name.

        A table count mismatch and missing tables are recorded; the tables
        present on both sides are still compared.
        """
        result = result if result is not None else ComparisonResult()
        strategies = ColumnStrategies(column_strategies)

        if len(expected) != len(actual):
            result.add_table_count_mismatch(len(expected), len(actual))

        for expected_table in expected:
            actual_table = actual.table(expected_table.name)
            if actual_table is None:
                result.add_missing_table(expected_table.name)
                continue
            self.compare_tables(expected_table, actual_table, strategies, result=result)

        return result

    def compare_tables(
        self,
        expected: Table,
        actual: Table,
        column_strategies: StrategySource = None,
        additional_columns: Iterable[str] | None = None,
        strict_columns: bool = False,
        result: ComparisonResult | None = None,
    ) -> ComparisonResult:
        """
        Compare two tables.

        Args:
            expected: Expected table
            actual: Actual table
            column_strategies: Column name to strategy; STRICT by default
            additional_columns: Columns compared even though the expected
                table does not declare them (expected values read as NULL)
            strict_columns: Also report actual columns nobody expected
            result: Result to add to; a new one when None

        Returns:
            The result holding this comparison's differences
        """
        result = result if result is not None else ComparisonResult()
        strategies = ColumnStrategies(column_strategies)
        table_name = expected.name
        before = result.difference_count

        additional = [c for c in (additional_columns or ()) if not expected.has_column(c)]
        columns = [
            column
            for column in (*expected.columns, *additional)
            if strategies.get(column).type != StrategyType.IGNORE
        ]

        present = []
        for column in columns:
            if actual.has_column(column):
                present.append(column)
            else:
                result.add_missing_column(table_name, column)

        if strict_columns:
            for column in actual.columns:
                if not expected.has_column(column) and column.casefold() not in {
                    c.casefold() for c in additional
                }:
                    result.add_unexpected_column(table_name, column)

        if expected.row_count != actual.row_count:
            result.add_row_count_mismatch(table_name, expected.row_count, actual.row_count)

        for index, (expected_row, actual_row) in enumerate(zip(expected.rows, actual.rows)):
            for column in present:
                strategy = strategies.get(column)
                expected_value = expected_row.get(column).value
                actual_value = actual_row.get(column).value
                if not strategy.matches(expected_value, actual_value):
                    result.add_value_mismatch(
                        table_name, index, column, expected_value, actual_value, str(strategy)
                    )

        found = result.differences[before:]
        for difference in found:
            ASSERTION_DIFFERENCES.labels(kind=difference.kind.value).inc()
        if found:
            logger.debug(f"Table {table_name}: {len(found)} difference(s)")

        return result

    def assert_equals(
        self,
        expected: Table | DataSet,
        actual: Table | DataSet,
        column_strategies: StrategySource = None,
        failure_handler: FailureHandler | None = None,
        additional_columns: Iterable[str] | None = None,
    ) -> ComparisonResult:
        """
        Compare and fail once if anything differs.

        Raises:
            ComparisonAssertionError: If there are differences and no
                failure handler was given
        """
        if isinstance(expected, DataSet) and isinstance(actual, DataSet):
            result = self.compare_data_sets(expected, actual, column_strategies)
        elif isinstance(expected, Table) and isinstance(actual, Table):
            result = self.compare_tables(expected, actual, column_strategies, additional_columns)
        else:
            raise TypeError(
                f"Cannot compare {type(expected).__name__} with {type(actual).__name__}"
            )

        self.report(result, failure_handler)
        return result

    def assert_equals_ignore_columns(
        self,
        expected: Table,
        actual: Table,
        ignore_columns: Iterable[str],
        failure_handler: FailureHandler | None = None,
    ) -> ComparisonResult:
        """Compare with the named columns mapped to IGNORE."""
        strategies = {column: ComparisonStrategy.IGNORE for column in ignore_columns}
        return self.assert_equals(expected, actual, strategies, failure_handler)

    @staticmethod
    def report(result: ComparisonResult, failure_handler: FailureHandler | None = None) -> None:
        """Hand differences to ``failure_handler`` once, or raise them."""
        if not result.has_differences:
            return

        message = result.format_message()
        if failure_handler is not None:
            failure_handler(message, result)
            return
        raise ComparisonAssertionError(message, result)
