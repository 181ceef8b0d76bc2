"""
Converter for boolean columns.

The column format can be set to two comma separated strings: the first is
written and read for True, the second for False. For example "1,0" writes 1
for True and 0 for False. Without a format "true" and "false" are used.
"""

from dataclasses import dataclass
from typing import Optional

from csvmapper.converters.base import Converter
from csvmapper.errors import ParseError
from csvmapper.models import ColumnInfo

# Generate a parse error for values that are neither the true nor the false string.
# Default is that an unknown value is read as False.
PARSE_ERROR_ON_INVALID_VALUE = 1 << 1
# Compare the true and false strings case-sensitively. Default is case-insensitive.
CASE_SENSITIVE = 1 << 2
# Always surround the output with quotes.
NEEDS_QUOTES = 1 << 3

DEFAULT_TRUE_STRING = "true"
DEFAULT_FALSE_STRING = "false"


@dataclass(frozen=True)
class BooleanConfig:
    true_string: str
    false_string: str
    parse_error_on_invalid: bool
    case_sensitive: bool
    needs_quotes: bool


class BooleanConverter(Converter):
    """Converts between strings and bool."""

    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> BooleanConfig:
        if format is None:
            true_string = DEFAULT_TRUE_STRING
            false_string = DEFAULT_FALSE_STRING
        else:
            parts = format.split(",", 1)
            if len(parts) != 2 or not parts[0] or not parts[1]:
                raise ValueError(f"Invalid boolean format should be in the form of T,F: {format}")
            true_string, false_string = parts
        return BooleanConfig(
            true_string=true_string,
            false_string=false_string,
            parse_error_on_invalid=bool(flags & PARSE_ERROR_ON_INVALID_VALUE),
            case_sensitive=bool(flags & CASE_SENSITIVE),
            needs_quotes=bool(flags & NEEDS_QUOTES),
        )

    def is_needs_quotes(self, config_info: BooleanConfig) -> bool:
        return config_info.needs_quotes

    def is_always_trim_input(self) -> bool:
        return False

    def value_to_string(self, column_info: ColumnInfo, value: Optional[bool]) -> Optional[str]:
        if value is None:
            return None
        config: BooleanConfig = column_info.config_info
        return config.true_string if value else config.false_string

    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError) -> Optional[bool]:
        config: BooleanConfig = column_info.config_info
        if not value:
            return None
        if self._matches(config, value, config.true_string):
            return True
        if self._matches(config, value, config.false_string):
            return False
        if config.parse_error_on_invalid:
            self.invalid_format(
                parse_error, line_pos,
                f"'{value}' is neither '{config.true_string}' nor '{config.false_string}'"
            )
            return None
        return False

    @staticmethod
    def _matches(config: BooleanConfig, value: str, expected: str) -> bool:
        if config.case_sensitive:
            return value == expected
        return value.lower() == expected.lower()
