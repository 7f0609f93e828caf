"""Unit tests for text-to-value conversion."""

import datetime
from decimal import Decimal

import pytest

from src.binding import SqlTypeCategory, convert, parse_boolean, try_convert


class TestParseBoolean:
    """Test boolean literal interpretation."""

    @pytest.mark.parametrize("text", ["true", "TRUE", "1", "yes", "YES", "y", " Y "])
    def test_true_literals(self, text):
        assert parse_boolean(text) is True

    @pytest.mark.parametrize("text", ["false", "0", "no", "n", "2", "", "maybe"])
    def test_everything_else_is_false(self, text):
        assert parse_boolean(text) is False


class TestTryConvert:
    """Test per-category conversion."""

    @pytest.mark.parametrize(
        "text,category,expected",
        [
            ("42", SqlTypeCategory.INTEGER, 42),
            (" -7 ", SqlTypeCategory.INTEGER, -7),
            ("10.0", SqlTypeCategory.INTEGER, 10),
            ("3.25", SqlTypeCategory.FLOAT, 3.25),
            ("100.00", SqlTypeCategory.DECIMAL, Decimal("100.00")),
            ("yes", SqlTypeCategory.BOOLEAN, True),
            ("2024-03-01", SqlTypeCategory.DATE, datetime.date(2024, 3, 1)),
            ("2024-03-01 10:20:30", SqlTypeCategory.DATE, datetime.date(2024, 3, 1)),
            ("10:20:30", SqlTypeCategory.TIME, datetime.time(10, 20, 30)),
            ("10:20:30.123", SqlTypeCategory.TIME, datetime.time(10, 20, 30)),
            ("2024-03-01T10:20:30", SqlTypeCategory.TIME, datetime.time(10, 20, 30)),
            (
                "2024-03-01 10:20:30",
                SqlTypeCategory.TIMESTAMP,
                datetime.datetime(2024, 3, 1, 10, 20, 30),
            ),
            ("[BASE64]QQ==", SqlTypeCategory.BINARY, b"A"),
            ("plain", SqlTypeCategory.BINARY, b"plain"),
            ("text", SqlTypeCategory.TEXT, "text"),
        ],
    )
    def test_converts(self, text, category, expected):
        assert try_convert(text, category) == expected

    @pytest.mark.parametrize(
        "text,category",
        [
            ("abc", SqlTypeCategory.INTEGER),
            ("10.5", SqlTypeCategory.INTEGER),
            ("x1", SqlTypeCategory.FLOAT),
            ("1,5", SqlTypeCategory.DECIMAL),
            ("2024-13-01", SqlTypeCategory.DATE),
            ("25:00", SqlTypeCategory.TIME),
            ("yesterday", SqlTypeCategory.TIMESTAMP),
            ("[BASE64]not base64!", SqlTypeCategory.BINARY),
        ],
    )
    def test_malformed_text_returns_none(self, text, category):
        assert try_convert(text, category) is None


class TestConvert:
    """Test conversion with raw-text fallback."""

    def test_falls_back_to_text(self):
        assert convert("abc", SqlTypeCategory.INTEGER) == "abc"

    def test_converted_value(self):
        assert convert("5", SqlTypeCategory.INTEGER) == 5
