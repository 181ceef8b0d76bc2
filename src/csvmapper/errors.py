"""
Error types for the CSV mapper.

Two tiers are used:
- configuration problems raise immediately (ConfigurationError)
- per-row problems are recorded in a ParseError that the caller owns
"""

from enum import Enum
from typing import List, Optional


class ErrorType(str, Enum):
    """Kinds of per-row parse errors."""
    NONE = "none"
    INVALID_FORMAT = "invalid_format"  # Token could not be converted
    REQUIRED_FIELD = "required_field"  # Required column was empty
    TRUNCATED_COLUMN = "truncated_column"  # Line had fewer fields than columns
    TOO_MANY_COLUMNS = "too_many_columns"
    NO_HEADER = "no_header"
    INVALID_HEADER = "invalid_header"


class ParseError:
    """Mutable parse diagnostic passed into conversion calls.

    A fresh instance starts in the NONE state. Conversion code fills in the
    error type, position and message when it rejects a token.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Return to the NONE state so the instance can be reused."""
        self.error_type = ErrorType.NONE
        self.line_number = 0
        self.line_pos = 0
        self.message: Optional[str] = None
        self.column_name: Optional[str] = None
        self.line: Optional[str] = None

    def is_error(self) -> bool:
        return self.error_type != ErrorType.NONE

    def __repr__(self) -> str:
        if not self.is_error():
            return "ParseError(NONE)"
        return (f"ParseError({self.error_type.name}, line={self.line_number}, "
                f"pos={self.line_pos}, column={self.column_name!r}, message={self.message!r})")

    def __str__(self) -> str:
        if not self.is_error():
            return "no error"
        column = f" column '{self.column_name}'" if self.column_name else ""
        message = f": {self.message}" if self.message else ""
        return f"line {self.line_number}, position {self.line_pos}{column}: {self.error_type.name}{message}"


class ConfigurationError(ValueError):
    """Raised when a column or processor cannot be configured."""
    pass


class CsvParseException(Exception):
    """Raised when a row fails and the caller asked not to continue."""

    def __init__(self, errors: List[ParseError], line_number: int):
        self.errors = errors
        self.line_number = line_number
        summary = "; ".join(str(e) for e in errors)
        super().__init__(f"Failed to parse line {line_number}: {summary}")
