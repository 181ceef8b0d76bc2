"""Tests for the string, numeric, date and UUID converters and the registry."""

import datetime as dt
import uuid
from decimal import Decimal

import pytest

from conftest import make_column
from csvmapper.converters import get_converter, register_converter, registered_types
from csvmapper.converters.boolean import BooleanConverter
from csvmapper.converters.text import TRIM_INPUT
from csvmapper.errors import ErrorType, ParseError


def read(column, value, line_pos=0):
    parse_error = ParseError()
    result = column.converter.string_to_value("line", 1, line_pos, column, value, parse_error)
    return result, parse_error


def write(column, value):
    return column.converter.value_to_string(column, value)


class TestRegistry:
    """Test converter lookup."""

    def test_builtin_types(self):
        for name in ("string", "boolean", "int", "decimal", "float", "date", "datetime", "uuid"):
            assert name in registered_types()

    def test_aliases_share_instances(self):
        assert get_converter("bool") is get_converter("boolean")
        assert get_converter("integer") is get_converter("int")
        assert get_converter("BOOLEAN") is get_converter("boolean")

    def test_unknown_type(self):
        with pytest.raises(KeyError):
            get_converter("complex")

    def test_register_custom(self):
        converter = BooleanConverter()
        register_converter("yes_no", converter)
        assert get_converter("yes_no") is converter


class TestStringConverter:

    def test_passthrough(self):
        column = make_column("name", "string")
        assert read(column, " John ")[0] == " John "
        assert write(column, "John") == "John"

    def test_empty_is_none(self):
        column = make_column("name", "string")
        assert read(column, "")[0] is None
        assert write(column, None) is None

    def test_trim_flag(self):
        column = make_column("name", "string", flags=TRIM_INPUT)
        assert read(column, "  John ")[0] == "John"
        assert read(column, "   ")[0] is None


class TestIntegerConverter:

    def test_parse(self):
        column = make_column("qty", "int")
        assert read(column, "42")[0] == 42
        assert read(column, "-7")[0] == -7
        assert column.converter.is_always_trim_input() is True

    def test_invalid(self):
        column = make_column("qty", "int")
        result, parse_error = read(column, "4.5", line_pos=3)
        assert result is None
        assert parse_error.error_type == ErrorType.INVALID_FORMAT
        assert parse_error.line_pos == 3

    def test_grouping_format(self):
        column = make_column("qty", "int", format=",")
        assert write(column, 1234567) == "1,234,567"
        assert read(column, "1,234,567")[0] == 1234567

    def test_bad_format(self):
        with pytest.raises(ValueError):
            make_column("qty", "int", format=".2q")


    def test_underscore_grouping_format(self):
        column = make_column("qty", "int", format="_d")
        assert write(column, 1000) == "1_000"
        assert read(column, "1_000")[0] == 1000


@pytest.mark.parametrize("type_name,text", [
    ("int", "1_000"),
    ("decimal", "1_000.5"),
    ("float", "1_0.5"),
    ("decimal", "NaN"),
    ("decimal", "-Infinity"),
    ("float", "nan"),
    ("float", "inf"),
    ("float", "1e999"),
])
def test_rejected_numbers(type_name, text):
    column = make_column("n", type_name)
    result, parse_error = read(column, text)
    assert result is None
    assert parse_error.error_type == ErrorType.INVALID_FORMAT


class TestDecimalConverter:

    def test_parse(self):
        column = make_column("price", "decimal")
        assert read(column, "10.50")[0] == Decimal("10.50")

    def test_default_output_is_fixed_point(self):
        column = make_column("price", "decimal")
        assert write(column, Decimal("1E+2")) == "100"
        assert write(column, Decimal("10.50")) == "10.50"

    def test_format(self):
        column = make_column("price", "decimal", format=",.2f")
        assert write(column, Decimal("1234.5")) == "1,234.50"
        assert read(column, "1,234.50")[0] == Decimal("1234.50")

    def test_invalid(self):
        column = make_column("price", "decimal")
        result, parse_error = read(column, "ten")
        assert result is None
        assert parse_error.error_type == ErrorType.INVALID_FORMAT


class TestFloatConverter:

    def test_parse_and_write(self):
        column = make_column("ratio", "float")
        assert read(column, "1.5e3")[0] == 1500.0
        assert write(column, 0.25) == "0.25"

    def test_format(self):
        column = make_column("ratio", "float", format=".1f")
        assert write(column, 0.25) == "0.2"


class TestDateConverters:

    def test_date_default(self):
        column = make_column("day", "date")
        assert read(column, "2024-01-15")[0] == dt.date(2024, 1, 15)
        assert write(column, dt.date(2024, 1, 15)) == "2024-01-15"

    def test_date_custom_format(self):
        column = make_column("day", "date", format="%d/%m/%Y")
        assert read(column, "15/01/2024")[0] == dt.date(2024, 1, 15)
        assert write(column, dt.date(2024, 1, 15)) == "15/01/2024"

    def test_datetime_default(self):
        column = make_column("at", "datetime")
        assert read(column, "2024-01-15T08:30:00")[0] == dt.datetime(2024, 1, 15, 8, 30)

    def test_invalid_date(self):
        column = make_column("day", "date")
        result, parse_error = read(column, "2024-13-01", line_pos=5)
        assert result is None
        assert parse_error.error_type == ErrorType.INVALID_FORMAT
        assert parse_error.line_pos == 5

    def test_format_without_directive(self):
        with pytest.raises(ValueError):
            make_column("day", "date", format="yyyy-MM-dd")


class TestUuidConverter:

    def test_round_trip(self):
        column = make_column("id", "uuid")
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert read(column, "12345678123456781234567812345678")[0] == value
        assert write(column, value) == "12345678-1234-5678-1234-567812345678"

    def test_invalid(self):
        column = make_column("id", "uuid")
        result, parse_error = read(column, "not-a-uuid")
        assert result is None
        assert parse_error.error_type == ErrorType.INVALID_FORMAT
