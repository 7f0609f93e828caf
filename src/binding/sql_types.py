"""
Semantic SQL type categories and the adapters that produce them.

Drivers describe columns in different vocabularies: psycopg2 reports type
OIDs, pyodbc reports Python types, SQLite reports declared type names. Each
is translated into one SqlTypeCategory at the boundary, and conversion code
only ever sees categories.
"""

import datetime
import re
from decimal import Decimal
from enum import Enum
from typing import Any


class SqlTypeCategory(str, Enum):
    """Destination type families a textual cell can be converted to."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    BINARY = "binary"
    TEXT = "text"


# PostgreSQL type OIDs (pg_type.oid) as reported in cursor.description by psycopg2
POSTGRES_TYPE_OIDS: dict[int, SqlTypeCategory] = {
    16: SqlTypeCategory.BOOLEAN,
    17: SqlTypeCategory.BINARY,
    20: SqlTypeCategory.INTEGER,
    21: SqlTypeCategory.INTEGER,
    23: SqlTypeCategory.INTEGER,
    26: SqlTypeCategory.INTEGER,
    700: SqlTypeCategory.FLOAT,
    701: SqlTypeCategory.FLOAT,
    790: SqlTypeCategory.DECIMAL,
    1700: SqlTypeCategory.DECIMAL,
    1082: SqlTypeCategory.DATE,
    1083: SqlTypeCategory.TIME,
    1266: SqlTypeCategory.TIME,
    1114: SqlTypeCategory.TIMESTAMP,
    1184: SqlTypeCategory.TIMESTAMP,
}

# Python types as reported in cursor.description by pyodbc
PYTHON_TYPES: dict[type, SqlTypeCategory] = {
    bool: SqlTypeCategory.BOOLEAN,
    int: SqlTypeCategory.INTEGER,
    float: SqlTypeCategory.FLOAT,
    Decimal: SqlTypeCategory.DECIMAL,
    datetime.datetime: SqlTypeCategory.TIMESTAMP,
    datetime.date: SqlTypeCategory.DATE,
    datetime.time: SqlTypeCategory.TIME,
    bytes: SqlTypeCategory.BINARY,
    bytearray: SqlTypeCategory.BINARY,
    memoryview: SqlTypeCategory.BINARY,
    str: SqlTypeCategory.TEXT,
}

# Declared type names, upper-cased, without length/precision
TYPE_NAMES: dict[str, SqlTypeCategory] = {
    **dict.fromkeys(
        ("INT", "INTEGER", "BIGINT", "SMALLINT", "TINYINT", "MEDIUMINT",
         "INT2", "INT4", "INT8", "SERIAL", "BIGSERIAL", "SMALLSERIAL"),
        SqlTypeCategory.INTEGER,
    ),
    **dict.fromkeys(
        ("REAL", "FLOAT", "FLOAT4", "FLOAT8", "DOUBLE", "DOUBLE PRECISION"),
        SqlTypeCategory.FLOAT,
    ),
    **dict.fromkeys(
        ("DECIMAL", "DEC", "NUMERIC", "NUMBER", "MONEY", "SMALLMONEY"),
        SqlTypeCategory.DECIMAL,
    ),
    **dict.fromkeys(("BOOLEAN", "BOOL", "BIT"), SqlTypeCategory.BOOLEAN),
    "DATE": SqlTypeCategory.DATE,
    **dict.fromkeys(
        ("TIME", "TIMETZ", "TIME WITHOUT TIME ZONE", "TIME WITH TIME ZONE"),
        SqlTypeCategory.TIME,
    ),
    **dict.fromkeys(
        ("TIMESTAMP", "TIMESTAMPTZ", "DATETIME", "DATETIME2", "SMALLDATETIME",
         "DATETIMEOFFSET", "TIMESTAMP WITHOUT TIME ZONE", "TIMESTAMP WITH TIME ZONE"),
        SqlTypeCategory.TIMESTAMP,
    ),
    **dict.fromkeys(
        ("BLOB", "TINYBLOB", "MEDIUMBLOB", "LONGBLOB", "BYTEA", "BINARY",
         "VARBINARY", "BINARY VARYING", "IMAGE"),
        SqlTypeCategory.BINARY,
    ),
}

_PRECISION = re.compile(r"\([^)]*\)")


def category_from_type_name(type_name: str | None) -> SqlTypeCategory:
    """
    Map a declared column type such as ``NUMERIC(10, 2)`` to a category.

    Unlisted names follow SQLite's affinity rules: anything containing INT
    is an integer, anything containing BLOB is binary, the rest is text.
    """
    if not type_name:
        return SqlTypeCategory.TEXT

    base = " ".join(_PRECISION.sub(" ", type_name).upper().split())
    category = TYPE_NAMES.get(base)
    if category is not None:
        return category
    if "INT" in base:
        return SqlTypeCategory.INTEGER
    if "BLOB" in base:
        return SqlTypeCategory.BINARY
    return SqlTypeCategory.TEXT


def category_from_type_code(type_code: Any) -> SqlTypeCategory:
    """
    Map a ``cursor.description`` type code to a category.

    Accepts psycopg2 OIDs, pyodbc Python types and type name strings;
    anything else (including SQLite's None) is text.
    """
    if isinstance(type_code, bool) or type_code is None:
        return SqlTypeCategory.TEXT
    if isinstance(type_code, int):
        return POSTGRES_TYPE_OIDS.get(type_code, SqlTypeCategory.TEXT)
    if isinstance(type_code, type):
        for python_type in type_code.__mro__:
            if python_type in PYTHON_TYPES:
                return PYTHON_TYPES[python_type]
        return SqlTypeCategory.TEXT
    if isinstance(type_code, str):
        return category_from_type_name(type_code)
    return SqlTypeCategory.TEXT
