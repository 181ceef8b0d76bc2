"""
Converters for numeric columns: int, decimal.Decimal and float.

The column format, when given, is a format() pattern used for output, for
example ",d" or ".2f". If the pattern groups digits with "," or "_", the same
separator is accepted on input; otherwise underscores are rejected. NaN and
infinity are not valid values.
"""

import math
from abc import abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from csvmapper.converters.base import Converter
from csvmapper.errors import ParseError
from csvmapper.models import ColumnInfo

NEEDS_QUOTES = 1 << 1

# The converter methods take a parameter called "format"
builtin_format = format


@dataclass(frozen=True)
class NumberConfig:
    format_spec: Optional[str]
    grouping: Optional[str]
    needs_quotes: bool


class NumberConverter(Converter):
    """Shared logic for the numeric converters."""

    type_name = "number"
    default_format: Optional[str] = None
    sample: Any = 0

    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> NumberConfig:
        format_spec = format if format is not None else self.default_format
        if format_spec is not None:
            try:
                builtin_format(self.sample, format_spec)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Invalid {self.type_name} format '{format_spec}': {e}")  # noqa: B904
        grouping = None
        if format_spec:
            if "," in format_spec:
                grouping = ","
            elif "_" in format_spec:
                grouping = "_"
        return NumberConfig(format_spec=format_spec, grouping=grouping, needs_quotes=bool(flags & NEEDS_QUOTES))

    def is_needs_quotes(self, config_info: NumberConfig) -> bool:
        return config_info.needs_quotes

    def is_always_trim_input(self) -> bool:
        return True

    def value_to_string(self, column_info: ColumnInfo, value) -> Optional[str]:
        if value is None:
            return None
        config: NumberConfig = column_info.config_info
        value = self.coerce(value)
        if config.format_spec is None:
            return str(value)
        return builtin_format(value, config.format_spec)

    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError):
        if not value:
            return None
        config: NumberConfig = column_info.config_info
        text = value.replace(config.grouping, "") if config.grouping else value
        try:
            if "_" in text:
                raise ValueError(text)
            return self.parse(text)
        except (ValueError, InvalidOperation):
            self.invalid_format(parse_error, line_pos, f"'{value}' is not a valid {self.type_name}")
            return None

    @abstractmethod
    def parse(self, text: str):
        """Convert trimmed text without grouping separators; raise ValueError if invalid."""

    def coerce(self, value):
        return value


class IntegerConverter(NumberConverter):
    type_name = "integer"

    def parse(self, text: str) -> int:
        return int(text)


class DecimalConverter(NumberConverter):
    type_name = "decimal"
    default_format = "f"
    sample = Decimal("0")

    def parse(self, text: str) -> Decimal:
        result = Decimal(text)
        if not result.is_finite():
            raise ValueError(text)
        return result

    def coerce(self, value) -> Decimal:
        return value if isinstance(value, Decimal) else Decimal(str(value))


class FloatConverter(NumberConverter):
    type_name = "float"
    sample = 0.0

    def parse(self, text: str) -> float:
        result = float(text)
        if not math.isfinite(result):
            raise ValueError(text)
        return result
