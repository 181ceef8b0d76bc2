"""
Converters for free text and UUID columns.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from csvmapper.converters.base import Converter
from csvmapper.errors import ParseError
from csvmapper.models import ColumnInfo

NEEDS_QUOTES = 1 << 1
# Strip leading and trailing whitespace from the input.
TRIM_INPUT = 1 << 2


@dataclass(frozen=True)
class StringConfig:
    needs_quotes: bool
    trim_input: bool


class StringConverter(Converter):
    """Passes text through unchanged. Empty input reads as None."""

    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> StringConfig:
        return StringConfig(needs_quotes=bool(flags & NEEDS_QUOTES), trim_input=bool(flags & TRIM_INPUT))

    def is_needs_quotes(self, config_info: StringConfig) -> bool:
        return config_info.needs_quotes

    def is_always_trim_input(self) -> bool:
        return False

    def value_to_string(self, column_info: ColumnInfo, value) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError) -> Optional[str]:
        config: StringConfig = column_info.config_info
        if config.trim_input:
            value = value.strip()
        return value or None


@dataclass(frozen=True)
class UuidConfig:
    needs_quotes: bool


class UuidConverter(Converter):
    """Converts between strings and uuid.UUID."""

    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> UuidConfig:
        return UuidConfig(needs_quotes=bool(flags & NEEDS_QUOTES))

    def is_needs_quotes(self, config_info: UuidConfig) -> bool:
        return config_info.needs_quotes

    def is_always_trim_input(self) -> bool:
        return True

    def value_to_string(self, column_info: ColumnInfo, value) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError) -> Optional[uuid.UUID]:
        if not value:
            return None
        try:
            return uuid.UUID(value)
        except ValueError:
            self.invalid_format(parse_error, line_pos, f"'{value}' is not a valid UUID")
            return None
