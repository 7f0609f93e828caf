"""Unit tests for table and data set comparison."""

from decimal import Decimal
from unittest.mock import Mock

import pytest
import yaml

from src.assertion import (
    ComparisonResult,
    ComparisonStrategy,
    DataSetComparator,
    DifferenceType,
    compare,
)
from src.dataset import DataSet, Table
from src.utils.errors import ComparisonAssertionError


def users(*rows, columns=("ID", "NAME")):
    return Table.of("USERS", list(columns), rows)


class TestCompareTables:
    """Test column, row count and value checks."""

    def setup_method(self):
        self.comparator = DataSetComparator()

    def test_identical_tables(self):
        result = self.comparator.compare_tables(users((1, "Alice")), users((1, "Alice")))

        assert not result.has_differences
        assert result.format_message() == "No differences found"

    def test_value_mismatch_path(self):
        result = self.comparator.compare_tables(users((1, "Alice")), users((1, "ALICE")))

        (difference,) = result.differences
        assert difference.path == "row[0].NAME"
        assert difference.expected == "Alice"
        assert difference.actual == "ALICE"
        assert difference.kind == DifferenceType.VALUE_MISMATCH

    def test_strategy_applied_per_column(self):
        result = self.comparator.compare_tables(
            users((1, "Alice")), users((1, "ALICE")), {"name": "CASE_INSENSITIVE"}
        )

        assert not result.has_differences

    def test_numeric_strategy(self):
        expected = Table.of("ORDERS", ["ID", "AMOUNT"], [(1, 100)])
        actual = Table.of("ORDERS", ["ID", "AMOUNT"], [(1, Decimal("100.00"))])

        assert self.comparator.compare_tables(expected, actual).difference_count == 1
        assert not self.comparator.compare_tables(expected, actual, {"AMOUNT": "NUMERIC"}).has_differences

    def test_ignored_column_never_compared_or_required(self):
        expected = users((1, "x"), columns=("ID", "UPDATED_AT"))
        actual = users((1,), columns=("ID",))

        result = self.comparator.compare_tables(expected, actual, {"UPDATED_AT": ComparisonStrategy.IGNORE})

        assert not result.has_differences

    def test_missing_column_reported_once(self):
        expected = users((1, "a"), (2, "b"))
        actual = users((1,), (2,), columns=("ID",))

        result = self.comparator.compare_tables(expected, actual)

        (difference,) = result.differences
        assert difference.kind == DifferenceType.MISSING_COLUMN
        assert difference.path == "column.NAME"

    def test_row_count_mismatch_still_compares_common_rows(self):
        expected = users((1, "Alice"), (2, "Bob"))
        actual = users((1, "Alicia"))

        result = self.comparator.compare_tables(expected, actual)

        assert [d.path for d in result.differences] == ["row_count", "row[0].NAME"]
        assert result.differences[0].expected == 2
        assert result.differences[0].actual == 1

    def test_every_mismatch_is_collected(self):
        expected = users((1, "a"), (2, "b"), (3, "c"))
        actual = users((1, "x"), (2, "b"), (9, "y"))

        result = self.comparator.compare_tables(expected, actual)

        assert [d.path for d in result.differences] == ["row[0].NAME", "row[2].ID", "row[2].NAME"]

    def test_null_handling(self):
        result = self.comparator.compare_tables(users((1, None)), users((1, "")))

        assert result.differences[0].path == "row[0].NAME"

    def test_strict_columns_reports_unexpected(self):
        expected = users((1,), columns=("ID",))
        actual = users((1, "x"), columns=("ID", "NAME"))

        result = self.comparator.compare_tables(expected, actual, strict_columns=True)

        (difference,) = result.differences
        assert difference.kind == DifferenceType.UNEXPECTED_COLUMN
        assert difference.to_dict() == {"path": "column.NAME", "expected": "not defined", "actual": "exists"}

    def test_additional_columns_compared_against_null(self):
        expected = users((1,), columns=("ID",))
        actual = users((1, "x"), columns=("ID", "NAME"))

        result = self.comparator.compare_tables(expected, actual, additional_columns=["NAME"])

        assert result.differences[0].path == "row[0].NAME"
        assert result.differences[0].expected is None

    def test_adds_to_existing_result(self):
        result = ComparisonResult()

        self.comparator.compare_tables(users((1, "a")), users((1, "b")), result=result)
        self.comparator.compare_tables(
            Table.of("ORDERS", ["ID"], [(1,)]), Table.of("ORDERS", ["ID"], [(2,)]), result=result
        )

        assert result.table_names == ["USERS", "ORDERS"]
        assert result.difference_count == 2


class TestCompareDataSets:
    """Test data set level comparison."""

    def setup_method(self):
        self.comparator = DataSetComparator()

    def test_missing_table_and_count_mismatch(self):
        expected = DataSet.of(users((1, "a")), Table.of("ORDERS", ["ID"], [(1,)]))
        actual = DataSet.of(users((1, "b")))

        result = self.comparator.compare_data_sets(expected, actual)

        kinds = [d.kind for d in result.differences]
        assert kinds == [
            DifferenceType.TABLE_COUNT,
            DifferenceType.VALUE_MISMATCH,
            DifferenceType.MISSING_TABLE,
        ]
        assert result.table_names == ["(dataset)", "USERS", "ORDERS"]

    def test_table_lookup_is_case_insensitive(self):
        expected = DataSet.of(users((1, "a")))
        actual = DataSet.of(Table.of("users", ["id", "name"], [(1, "a")]))

        assert not self.comparator.compare_data_sets(expected, actual).has_differences


class TestAssertEquals:
    """Test failure reporting."""

    def setup_method(self):
        self.comparator = DataSetComparator()

    def test_raises_with_full_report(self):
        with pytest.raises(ComparisonAssertionError) as exc_info:
            self.comparator.assert_equals(users((1, "Alice"), (2, "Bob")), users((1, "ALICE"), (2, "Rob")))

        message = str(exc_info.value)
        assert message.startswith("Assertion failed: 2 differences in USERS\n")
        assert exc_info.value.result.difference_count == 2
        assert "row[1].NAME" in message

    def test_failure_handler_called_once_instead_of_raising(self):
        handler = Mock()

        result = self.comparator.assert_equals(
            DataSet.of(users((1, "a"))), DataSet.of(users((1, "b"))), failure_handler=handler
        )

        handler.assert_called_once()
        message, passed_result = handler.call_args.args
        assert message.startswith("Assertion failed: 1 difference in USERS")
        assert passed_result is result

    def test_handler_not_called_when_equal(self):
        handler = Mock()

        self.comparator.assert_equals(users((1, "a")), users((1, "a")), failure_handler=handler)

        handler.assert_not_called()

    def test_mixed_types_rejected(self):
        with pytest.raises(TypeError):
            self.comparator.assert_equals(users(), DataSet.of(users()))

    def test_ignore_columns(self):
        result = self.comparator.assert_equals_ignore_columns(
            users((1, "a")), users((1, "b")), ["NAME"]
        )

        assert not result.has_differences

    def test_compare_function_returns_differences(self):
        assert compare(users((1, "a")), users((1, "a"))) == []

        differences = compare(users((1, "a")), users((1, "b")), failure_handler=lambda m, r: None)
        assert [d.path for d in differences] == ["row[0].NAME"]


class TestReport:
    """Test the YAML failure report."""

    def test_report_structure(self):
        result = ComparisonResult()
        result.add_value_mismatch("USERS", 0, "NAME", "Alice", "ALICE")
        result.add_value_mismatch("USERS", 1, "EMAIL", "x", None, "REGEX:.+@.+")
        result.add_row_count_mismatch("ORDERS", 2, 3)

        summary, _, body = result.format_message().partition("\n")
        report = yaml.safe_load(body)

        assert summary == "Assertion failed: 3 differences in USERS, ORDERS"
        assert report["summary"] == {"status": "FAILED", "total_differences": 3}
        assert report["tables"]["USERS"]["differences"] == [
            {"path": "row[0].NAME", "expected": "Alice", "actual": "ALICE"},
            {"path": "row[1].EMAIL", "expected": "x", "actual": "null", "strategy": "REGEX:.+@.+"},
        ]
        assert report["tables"]["ORDERS"]["differences"] == [
            {"path": "row_count", "expected": "2", "actual": "3"}
        ]

    def test_assert_no_differences(self):
        result = ComparisonResult()
        result.assert_no_differences()

        result.add_missing_table("ORDERS")
        with pytest.raises(ComparisonAssertionError, match="ORDERS"):
            result.assert_no_differences()

    def test_differences_for_table(self):
        result = ComparisonResult()
        result.add_missing_column("USERS", "EMAIL")

        assert result.differences_for("USERS")[0].path == "column.EMAIL"
        assert result.differences_for("ORDERS") == []
