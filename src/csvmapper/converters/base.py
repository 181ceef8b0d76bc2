"""
Converter contract shared by all column types.

A converter translates between the raw text of one field and a typed Python
value. Converters are stateless; everything specific to a column lives in the
configuration object returned by ``configure`` and cached on the ColumnInfo.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from csvmapper.errors import ErrorType, ParseError
from csvmapper.models import ColumnInfo


class Converter(ABC):
    """Base class for column converters."""

    @abstractmethod
    def configure(self, format: Optional[str], flags: int, column_info: ColumnInfo) -> Any:
        """Build the per-column configuration.

        Args:
            format: Optional converter-specific format string, None for the default
            flags: Converter-specific flag bits, 0 if none
            column_info: Column the configuration is built for

        Returns:
            Converter-owned configuration object

        Raises:
            ValueError: If the format is malformed for this converter
        """

    @abstractmethod
    def is_needs_quotes(self, config_info: Any) -> bool:
        """Whether output values must always be quoted."""

    @abstractmethod
    def is_always_trim_input(self) -> bool:
        """Whether raw input must be stripped before string_to_value."""

    @abstractmethod
    def value_to_string(self, column_info: ColumnInfo, value: Any) -> Optional[str]:
        """Render a typed value, returning None for None."""

    @abstractmethod
    def string_to_value(self, line: str, line_number: int, line_pos: int, column_info: ColumnInfo,
                        value: str, parse_error: ParseError) -> Any:
        """Convert raw field text into a typed value.

        Args:
            line: Full text of the logical line, for diagnostics
            line_number: 1-based line number of the field
            line_pos: 0-based position of the field in its line
            column_info: Column being converted
            value: Raw field text
            parse_error: Filled in when the text cannot be converted

        Returns:
            Typed value, or None for empty input or on error
        """

    @staticmethod
    def invalid_format(parse_error: ParseError, line_pos: int, message: str) -> None:
        """Record an INVALID_FORMAT error."""
        parse_error.error_type = ErrorType.INVALID_FORMAT
        parse_error.line_pos = line_pos
        parse_error.message = message
