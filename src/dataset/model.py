"""
Immutable tabular data model shared by preparation and verification.

A DataSet holds Tables, a Table holds ordered column names and Rows, and a
Row maps column names to CellValues. Every "mutation" returns a new object,
so one fixture can be reused across several operations and comparisons.
Column and table names are looked up case-insensitively but keep the
spelling they were created with.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

DEFAULT_SCENARIO_MARKER = "[Scenario]"


@dataclass(frozen=True)
class CellValue:
    """
    A single cell: a typed value or the explicit NULL marker.

    An empty string is a value, never NULL.
    """

    value: Any = None

    NULL: ClassVar["CellValue"]

    @property
    def is_null(self) -> bool:
        return self.value is None

    @classmethod
    def of(cls, value: Any) -> "CellValue":
        """Wrap a raw value; CellValues pass through and None becomes NULL."""
        if isinstance(value, CellValue):
            return value
        if value is None:
            return cls.NULL
        return cls(value)

    def __repr__(self) -> str:
        return "NULL" if self.is_null else f"CellValue({self.value!r})"


CellValue.NULL = CellValue(None)


def _fold(name: str) -> str:
    return name.casefold()


@dataclass(frozen=True)
class Row:
    """Mapping from column name to CellValue."""

    values: Mapping[str, CellValue] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        wrapped = {column: CellValue.of(value) for column, value in dict(self.values).items()}
        object.__setattr__(self, "values", MappingProxyType(wrapped))

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.values)

    def resolve_column(self, column: str) -> str | None:
        """Return the row's spelling of ``column``, or None if absent."""
        if column in self.values:
            return column
        folded = _fold(column)
        for name in self.values:
            if _fold(name) == folded:
                return name
        return None

    def has_column(self, column: str) -> bool:
        return self.resolve_column(column) is not None

    def get(self, column: str) -> CellValue:
        """Return the cell for ``column``; an absent column reads as NULL."""
        name = self.resolve_column(column)
        if name is None:
            return CellValue.NULL
        return self.values[name]

    def to_dict(self) -> dict[str, Any]:
        return {column: cell.value for column, cell in self.values.items()}


def _to_row(row: "Row | Mapping[str, Any]") -> Row:
    if isinstance(row, Row):
        return row
    return Row(row)


@dataclass(frozen=True)
class Table:
    """
    A named table with ordered columns and rows.

    Invariants:
        - column names are unique (case-insensitively)
        - every row's columns are a subset of the table's columns
    """

    name: str
    columns: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()

    def __post_init__(self):
        if not self.name:
            raise ValueError("Table name cannot be empty")

        columns = tuple(self.columns)
        folded = [_fold(column) for column in columns]
        if len(set(folded)) != len(folded):
            raise ValueError(f"Duplicate column names in table {self.name}: {list(columns)}")

        rows = tuple(_to_row(row) for row in self.rows)
        known = set(folded)
        for index, row in enumerate(rows):
            unknown = [column for column in row.columns if _fold(column) not in known]
            if unknown:
                raise ValueError(
                    f"Row {index} of table {self.name} has columns not in the table: {unknown}"
                )

        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "rows", rows)

    @classmethod
    def of(
        cls,
        name: str,
        columns: Sequence[str],
        rows: Iterable["Row | Mapping[str, Any] | Sequence[Any]"] = (),
    ) -> "Table":
        """
        Build a table from plain Python values.

        Rows may be mappings or positional sequences matching ``columns``.
        """
        columns = tuple(columns)
        built = []
        for row in rows:
            if isinstance(row, (Row, Mapping)):
                built.append(_to_row(row))
            else:
                values = tuple(row)
                if len(values) != len(columns):
                    raise ValueError(
                        f"Row for table {name} has {len(values)} values, expected {len(columns)}"
                    )
                built.append(Row(dict(zip(columns, values))))
        return cls(name, columns, tuple(built))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def resolve_column(self, column: str) -> str | None:
        """Return the table's spelling of ``column``, or None if absent."""
        folded = _fold(column)
        for name in self.columns:
            if _fold(name) == folded:
                return name
        return None

    def has_column(self, column: str) -> bool:
        return self.resolve_column(column) is not None

    def column_values(self, column: str) -> list[CellValue]:
        return [row.get(column) for row in self.rows]

    def with_rows(self, rows: Iterable["Row | Mapping[str, Any]"]) -> "Table":
        return Table(self.name, self.columns, tuple(rows))

    def select_columns(self, columns: Iterable[str]) -> "Table":
        """Project onto ``columns``; names the table lacks are skipped."""
        selected = [name for name in (self.resolve_column(c) for c in columns) if name]
        return self._project(selected)

    def exclude_columns(self, columns: Iterable[str]) -> "Table":
        excluded = {_fold(column) for column in columns}
        if not excluded:
            return self
        return self._project([c for c in self.columns if _fold(c) not in excluded])

    def _project(self, columns: list[str]) -> "Table":
        rows = tuple(
            Row({c: row.get(c) for c in columns if row.has_column(c)}) for row in self.rows
        )
        return Table(self.name, tuple(columns), rows)

    def filter_scenarios(
        self,
        scenario_names: Iterable[str],
        marker: str = DEFAULT_SCENARIO_MARKER,
    ) -> "Table":
        """
        Keep the rows belonging to the given scenarios and drop the marker column.

        Rows with a blank or NULL marker belong to every scenario. With no
        scenario names every row is kept. A table without the marker column
        is returned unchanged.
        """
        marker_column = self.resolve_column(marker)
        if marker_column is None:
            return self

        names = {name.strip() for name in scenario_names if name and name.strip()}
        kept = []
        for row in self.rows:
            cell = row.get(marker_column)
            scenario = "" if cell.is_null else str(cell.value).strip()
            if not names or not scenario or scenario in names:
                kept.append(row)

        return self.with_rows(kept).exclude_columns([marker_column])

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "columns": list(self.columns),
            "rows": [row.to_dict() for row in self.rows],
        }


@dataclass(frozen=True)
class DataSet:
    """An ordered collection of uniquely named tables."""

    tables: tuple[Table, ...] = ()

    def __post_init__(self):
        tables = tuple(self.tables)
        names = [_fold(table.name) for table in tables]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate table names in data set: {[t.name for t in tables]}")
        object.__setattr__(self, "tables", tables)

    @classmethod
    def of(cls, *tables: Table) -> "DataSet":
        return cls(tuple(tables))

    def __iter__(self) -> Iterator[Table]:
        return iter(self.tables)

    def __len__(self) -> int:
        return len(self.tables)

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def table(self, name: str) -> Table | None:
        """Find a table by name, case-insensitively."""
        folded = _fold(name)
        for table in self.tables:
            if _fold(table.name) == folded:
                return table
        return None

    def filter_scenarios(
        self,
        scenario_names: Iterable[str],
        marker: str = DEFAULT_SCENARIO_MARKER,
    ) -> "DataSet":
        names = list(scenario_names)
        return DataSet(tuple(table.filter_scenarios(names, marker) for table in self.tables))

    def exclude_columns(self, columns: Iterable[str]) -> "DataSet":
        columns = list(columns)
        return DataSet(tuple(table.exclude_columns(columns) for table in self.tables))
