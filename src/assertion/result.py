"""
Comparison results and the failure report.

Differences are collected per table in discovery order. The report is a
one-line summary followed by a YAML document listing every difference.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import yaml

from src.utils.errors import ComparisonAssertionError

DATASET_KEY = "(dataset)"


class DifferenceType(str, Enum):
    TABLE_COUNT = "TABLE_COUNT"
    MISSING_TABLE = "MISSING_TABLE"
    ROW_COUNT = "ROW_COUNT"
    MISSING_COLUMN = "MISSING_COLUMN"
    UNEXPECTED_COLUMN = "UNEXPECTED_COLUMN"
    VALUE_MISMATCH = "VALUE_MISMATCH"


def format_value(value: Any, show_type: bool = False) -> str:
    """Render a cell for the report; ``show_type`` uses repr() to expose the type."""
    if value is None:
        return "null"
    return repr(value) if show_type else str(value)


@dataclass(frozen=True)
class Difference:
    """One discrepancy between expected and actual data."""

    table: str
    path: str
    expected: Any
    actual: Any
    kind: DifferenceType
    strategy: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used in the YAML report."""
        # "1" and 1 print the same; show the types when they differ
        show_type = (
            self.expected is not None
            and self.actual is not None
            and type(self.expected) is not type(self.actual)
        )
        data = {
            "path": self.path,
            "expected": format_value(self.expected, show_type),
            "actual": format_value(self.actual, show_type),
        }
        if self.strategy and self.strategy != "STRICT":
            data["strategy"] = self.strategy
        return data


class ComparisonResult:
    """Collects differences from one or more table comparisons."""

    def __init__(self):
        self._tables: dict[str, list[Difference]] = {}
        self._differences: list[Difference] = []

    def add(self, difference: Difference) -> None:
        self._tables.setdefault(difference.table, []).append(difference)
        self._differences.append(difference)

    def add_table_count_mismatch(self, expected: int, actual: int) -> None:
        self.add(Difference(DATASET_KEY, "table_count", expected, actual, DifferenceType.TABLE_COUNT))

    def add_missing_table(self, table: str) -> None:
        self.add(Difference(table, "table", "exists", "not found", DifferenceType.MISSING_TABLE))

    def add_row_count_mismatch(self, table: str, expected: int, actual: int) -> None:
        self.add(Difference(table, "row_count", expected, actual, DifferenceType.ROW_COUNT))

    def add_missing_column(self, table: str, column: str) -> None:
        self.add(Difference(
            table, f"column.{column}", "exists", "column not found", DifferenceType.MISSING_COLUMN
        ))

    def add_unexpected_column(self, table: str, column: str) -> None:
        self.add(Difference(
            table, f"column.{column}", "not defined", "exists", DifferenceType.UNEXPECTED_COLUMN
        ))

    def add_value_mismatch(
        self,
        table: str,
        row_index: int,
        column: str,
        expected: Any,
        actual: Any,
        strategy: str | None = None,
    ) -> None:
        self.add(Difference(
            table,
            f"row[{row_index}].{column}",
            expected,
            actual,
            DifferenceType.VALUE_MISMATCH,
            strategy,
        ))

    @property
    def differences(self) -> list[Difference]:
        """All differences in the order they were found."""
        return list(self._differences)

    @property
    def table_names(self) -> list[str]:
        return list(self._tables)

    def differences_for(self, table: str) -> list[Difference]:
        return list(self._tables.get(table, ()))

    @property
    def difference_count(self) -> int:
        return len(self._differences)

    @property
    def has_differences(self) -> bool:
        return bool(self._tables)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": {
                "status": "FAILED" if self.has_differences else "PASSED",
                "total_differences": self.difference_count,
            },
            "tables": {
                table: {"differences": [d.to_dict() for d in differences]}
                for table, differences in self._tables.items()
            },
        }

    def summary_line(self) -> str:
        count = self.difference_count
        noun = "difference" if count == 1 else "differences"
        return f"Assertion failed: {count} {noun} in {', '.join(self._tables)}"

    def format_message(self) -> str:
        """
        Render the failure report.

        Example:
            Assertion failed: 1 difference in USERS
            summary:
              status: FAILED
              total_differences: 1
            tables:
              USERS:
                differences:
                - path: row[0].NAME
                  expected: Alice
                  actual: ALICE
        """
        if not self.has_differences:
            return "No differences found"

        details = yaml.safe_dump(
            self.to_dict(),
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )
        return f"{self.summary_line()}\n{details}".strip()

    def assert_no_differences(self) -> None:
        """
        Raises:
            ComparisonAssertionError: If any difference was recorded
        """
        if self.has_differences:
            raise ComparisonAssertionError(self.format_message(), self)

    def __repr__(self) -> str:
        return f"ComparisonResult(differences={self.difference_count}, tables={self.table_names})"
