"""Unit tests for type category mapping."""

import datetime
from decimal import Decimal

import pytest

from src.binding import SqlTypeCategory, category_from_type_code, category_from_type_name


class TestCategoryFromTypeName:
    """Test declared type name mapping."""

    @pytest.mark.parametrize(
        "type_name,expected",
        [
            ("INTEGER", SqlTypeCategory.INTEGER),
            ("bigint", SqlTypeCategory.INTEGER),
            ("NUMERIC(10, 2)", SqlTypeCategory.DECIMAL),
            ("double precision", SqlTypeCategory.FLOAT),
            ("BOOLEAN", SqlTypeCategory.BOOLEAN),
            ("bit", SqlTypeCategory.BOOLEAN),
            ("DATE", SqlTypeCategory.DATE),
            ("time with time zone", SqlTypeCategory.TIME),
            ("DATETIME2(7)", SqlTypeCategory.TIMESTAMP),
            ("timestamp with time zone", SqlTypeCategory.TIMESTAMP),
            ("VARBINARY(MAX)", SqlTypeCategory.BINARY),
            ("BYTEA", SqlTypeCategory.BINARY),
            ("VARCHAR(50)", SqlTypeCategory.TEXT),
        ],
    )
    def test_known_names(self, type_name, expected):
        assert category_from_type_name(type_name) == expected

    def test_sqlite_affinity_fallbacks(self):
        assert category_from_type_name("UNSIGNED BIG INT") == SqlTypeCategory.INTEGER
        assert category_from_type_name("MY_BLOB_TYPE") == SqlTypeCategory.BINARY
        assert category_from_type_name("CLOB") == SqlTypeCategory.TEXT

    @pytest.mark.parametrize("type_name", [None, ""])
    def test_missing_name_is_text(self, type_name):
        assert category_from_type_name(type_name) == SqlTypeCategory.TEXT


class TestCategoryFromTypeCode:
    """Test cursor.description type code mapping."""

    @pytest.mark.parametrize(
        "oid,expected",
        [
            (16, SqlTypeCategory.BOOLEAN),
            (17, SqlTypeCategory.BINARY),
            (23, SqlTypeCategory.INTEGER),
            (1700, SqlTypeCategory.DECIMAL),
            (1082, SqlTypeCategory.DATE),
            (1184, SqlTypeCategory.TIMESTAMP),
            (25, SqlTypeCategory.TEXT),
        ],
    )
    def test_postgres_oids(self, oid, expected):
        assert category_from_type_code(oid) == expected

    @pytest.mark.parametrize(
        "python_type,expected",
        [
            (bool, SqlTypeCategory.BOOLEAN),
            (int, SqlTypeCategory.INTEGER),
            (Decimal, SqlTypeCategory.DECIMAL),
            (datetime.datetime, SqlTypeCategory.TIMESTAMP),
            (datetime.date, SqlTypeCategory.DATE),
            (bytearray, SqlTypeCategory.BINARY),
            (str, SqlTypeCategory.TEXT),
        ],
    )
    def test_pyodbc_python_types(self, python_type, expected):
        assert category_from_type_code(python_type) == expected

    def test_subclass_uses_nearest_base(self):
        class MyInt(int):
            pass

        assert category_from_type_code(MyInt) == SqlTypeCategory.INTEGER

    def test_string_codes_use_type_names(self):
        assert category_from_type_code("NUMBER") == SqlTypeCategory.DECIMAL

    @pytest.mark.parametrize("code", [None, True, object()])
    def test_unusable_codes_are_text(self, code):
        assert category_from_type_code(code) == SqlTypeCategory.TEXT
