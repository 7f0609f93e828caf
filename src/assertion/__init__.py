"""
Strategy-driven comparison of expected and actual tabular data.
"""

from collections.abc import Iterable

from src.dataset.model import DataSet, Table

from .comparator import DataSetComparator, FailureHandler
from .reader import TableReader
from .result import ComparisonResult, Difference, DifferenceType
from .strategy import (
    ColumnStrategies,
    ColumnStrategyMapping,
    ComparisonStrategy,
    StrategySource,
    StrategyType,
)
from .verifier import ExpectationVerifier


def compare(
    expected: Table | DataSet,
    actual: Table | DataSet,
    column_strategies: StrategySource = None,
    failure_handler: FailureHandler | None = None,
    additional_columns: Iterable[str] | None = None,
) -> list[Difference]:
    """
    Compare expected and actual data.

    Returns:
        Every difference found; empty when the data matches

    Raises:
        ComparisonAssertionError: If anything differs and no failure
            handler was given; the handler is called once otherwise
    """
    result = DataSetComparator().assert_equals(
        expected, actual, column_strategies, failure_handler, additional_columns
    )
    return result.differences


__all__ = [
    "compare",
    "DataSetComparator",
    "FailureHandler",
    "TableReader",
    "ExpectationVerifier",
    "ComparisonResult",
    "Difference",
    "DifferenceType",
    "ComparisonStrategy",
    "ColumnStrategies",
    "ColumnStrategyMapping",
    "StrategyType",
]
