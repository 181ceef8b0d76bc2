"""
Converters for date and datetime columns.

The column format is a strftime/strptime pattern. Defaults are ISO 8601:
"%Y-%m-%d" for dates and "%Y-%m-%dT%H:%M:%S" for datetimes.
"""

import datetime as dt
from dataclasses import dataclass
from typing import Optional, Union

from csvmapper.converters.base import Converter
from csvmapper.errors import ParseError
from csvmapper.models import ColumnInfo

NEEDS_QUOTES = 1 << 1


@dataclass(frozen=True)
class DateConfig:
    pattern: str
    needs_quotes: bool


class DateTimeConverter(Converter):
    """Converts between strings and datetime.datetime."""

    default_pattern = "%Y-%m-%dT%H:%M:%S"
    type_name = "datetime"

    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> DateConfig:
        pattern = format if format is not None else self.default_pattern
        if "%" not in pattern:
            raise ValueError(f"Invalid {self.type_name} format '{pattern}': no % directive")
        return DateConfig(pattern=pattern, needs_quotes=bool(flags & NEEDS_QUOTES))

    def is_needs_quotes(self, config_info: DateConfig) -> bool:
        return config_info.needs_quotes

    def is_always_trim_input(self) -> bool:
        return True

    def value_to_string(self, column_info: ColumnInfo, value: Union[dt.date, dt.datetime, None]) -> Optional[str]:
        if value is None:
            return None
        config: DateConfig = column_info.config_info
        return value.strftime(config.pattern)

    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError):
        if not value:
            return None
        config: DateConfig = column_info.config_info
        try:
            return self.convert(dt.datetime.strptime(value, config.pattern))
        except ValueError:
            self.invalid_format(
                parse_error, line_pos,
                f"'{value}' does not match {self.type_name} format '{config.pattern}'"
            )
            return None

    def convert(self, parsed: dt.datetime):
        return parsed


class DateConverter(DateTimeConverter):
    """Converts between strings and datetime.date."""

    default_pattern = "%Y-%m-%d"
    type_name = "date"

    def convert(self, parsed: dt.datetime) -> dt.date:
        return parsed.date()
