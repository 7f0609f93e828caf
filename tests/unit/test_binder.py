"""Unit tests for parameter binding."""

import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from prometheus_client import REGISTRY

from src.binding import (
    ColumnTypes,
    ParameterBinder,
    SqlTypeCategory,
    bind,
    column_types_from_description,
    read_column_types,
)
from src.dataset import CellValue, Row
from src.utils.database_types import DatabaseType


def fallback_count(category: str) -> float:
    value = REGISTRY.get_sample_value(
        "dbfixture_value_conversion_fallbacks_total", {"category": category}
    )
    return value or 0.0


class TestParameterBinder:
    """Test conversion of cells to driver parameters."""

    def setup_method(self):
        self.binder = ParameterBinder()

    def test_null_binds_none(self):
        assert self.binder.to_parameter(CellValue.NULL, SqlTypeCategory.INTEGER) is None
        assert self.binder.to_parameter(None) is None

    def test_empty_string_is_not_null(self):
        assert self.binder.to_parameter("", SqlTypeCategory.TEXT) == ""

    def test_text_is_converted_for_category(self):
        assert self.binder.to_parameter("42", SqlTypeCategory.INTEGER) == 42
        assert self.binder.to_parameter("100.00", SqlTypeCategory.DECIMAL) == Decimal("100.00")
        assert self.binder.to_parameter("y", SqlTypeCategory.BOOLEAN) is True
        assert self.binder.to_parameter("[BASE64]QQ==", SqlTypeCategory.BINARY) == b"A"

    def test_native_values_pass_through(self):
        moment = datetime.datetime(2024, 1, 1)

        assert self.binder.to_parameter(moment, SqlTypeCategory.DATE) is moment
        assert self.binder.to_parameter(7, SqlTypeCategory.TEXT) == 7

    def test_text_without_category_is_unconverted(self):
        assert self.binder.to_parameter("42") == "42"

    def test_unparsable_text_falls_back_to_raw_string(self):
        before = fallback_count("integer")

        result = self.binder.to_parameter("abc", SqlTypeCategory.INTEGER)

        assert result == "abc"
        assert fallback_count("integer") == before + 1

    def test_bind_grows_parameter_list(self):
        parameters = []

        self.binder.bind(parameters, 2, "5", SqlTypeCategory.INTEGER)

        assert parameters == [None, None, 5]

    def test_bind_overwrites_existing_slot(self):
        parameters = ["a", "b"]

        self.binder.bind(parameters, 0, CellValue.NULL)

        assert parameters == [None, "b"]

    def test_bind_rejects_negative_index(self):
        with pytest.raises(IndexError):
            self.binder.bind([], -1, "x")

    def test_bind_row_follows_column_order(self):
        row = Row({"ID": "1", "ACTIVE": "no", "NAME": "Alice"})
        types = ColumnTypes({"id": SqlTypeCategory.INTEGER, "active": SqlTypeCategory.BOOLEAN})

        parameters = self.binder.bind_row(row, ["NAME", "ID", "ACTIVE"], types)

        assert parameters == ("Alice", 1, False)

    def test_module_level_bind(self):
        parameters = []

        bind(parameters, 0, "true", SqlTypeCategory.BOOLEAN)

        assert parameters == [True]


class TestColumnTypes:
    """Test ColumnTypes lookups and metadata reads."""

    def test_lookup_is_case_insensitive_with_text_default(self):
        types = ColumnTypes({"Amount": SqlTypeCategory.DECIMAL})

        assert types["AMOUNT"] == SqlTypeCategory.DECIMAL
        assert types.category("amount") == SqlTypeCategory.DECIMAL
        assert types.category("missing") == SqlTypeCategory.TEXT
        assert list(types) == ["AMOUNT"]

    def test_from_description(self):
        description = [("id", 23, None, None, None, None, None), ("name", 25, None, None, None, None, None)]

        types = column_types_from_description(description)

        assert types.category("ID") == SqlTypeCategory.INTEGER
        assert types.category("NAME") == SqlTypeCategory.TEXT

    def test_read_uses_zero_row_probe(self):
        # Arrange
        cursor = MagicMock()
        cursor.description = [("id", int, None, None, None, None, None)]
        connection = MagicMock()
        connection.cursor.return_value = cursor

        # Act
        types = read_column_types(connection, "app.users", DatabaseType.SQLSERVER)

        # Assert
        cursor.execute.assert_called_once_with("SELECT * FROM app.users WHERE 1=0")
        cursor.close.assert_called_once()
        assert types.category("ID") == SqlTypeCategory.INTEGER

    def test_read_sqlite_uses_declared_types(self, sqlite_connection):
        sqlite_connection.execute("CREATE TABLE items (id INTEGER, price NUMERIC(10,2), data BLOB, note TEXT)")

        types = read_column_types(sqlite_connection, "items")

        assert types.category("ID") == SqlTypeCategory.INTEGER
        assert types.category("PRICE") == SqlTypeCategory.DECIMAL
        assert types.category("DATA") == SqlTypeCategory.BINARY
        assert types.category("NOTE") == SqlTypeCategory.TEXT

    def test_read_rejects_invalid_table_name(self):
        with pytest.raises(ValueError):
            read_column_types(MagicMock(), "users; DROP TABLE x")
