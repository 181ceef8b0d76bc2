"""
Pydantic models for strongly-typed processor configuration.

A ProcessorConfig describes the CSV dialect, the reading policies and the
ordered list of columns. RowProcessor.from_config turns it into ColumnInfo
objects.
"""

import json
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


class FieldType(str, Enum):
    """Column types with a registered converter."""
    STRING = "string"
    BOOLEAN = "boolean"
    BOOL = "bool"
    INT = "int"
    INTEGER = "integer"
    DECIMAL = "decimal"
    NUMBER = "number"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"
    UUID = "uuid"


class ColumnConfig(BaseModel):
    """Column definition configuration."""
    name: str = Field(..., min_length=1, description="Column name, also used in the header")
    type: FieldType = Field(FieldType.STRING, description="Column data type")
    format: Optional[str] = Field(None, description="Converter-specific format string")
    converter_flags: int = Field(0, ge=0, description="Converter-specific flag bits")
    required: bool = Field(False, description="Reject rows where this column is empty")
    trim_input: bool = Field(False, description="Strip whitespace before conversion")


class ProcessorConfig(BaseModel):
    """Main processor configuration."""
    columns: List[ColumnConfig] = Field(..., min_length=1, description="Columns in file order")

    delimiter: str = Field(",", description="Field delimiter character")
    quote_char: str = Field('"', description="Quote character")
    escape_char: Optional[str] = Field(None, description="Escape character (None = no escaping)")
    encoding: str = Field("utf-8", description="File encoding")

    first_line_header: bool = Field(True, description="First line holds the column names")
    validate_header: bool = Field(True, description="Check the header against the column names")
    ignore_blank_lines: bool = Field(True, description="Skip empty lines")
    allow_short_lines: bool = Field(False, description="Missing trailing fields read as None")
    flag_extra_columns: bool = Field(False, description="Report lines with more fields than columns")
    allow_partial_rows: bool = Field(
        False,
        description="Keep converting the remaining columns of a row after a column fails"
    )
    continue_on_error: bool = Field(
        False,
        description="Continue with the next row when a row fails instead of raising"
    )

    @field_validator("delimiter", "quote_char")
    @classmethod
    def validate_single_char(cls, value):
        """Ensure the delimiter and quote are one character."""
        if len(value) != 1:
            raise ValueError(f"must be a single character, got {value!r}")
        if value in "\r\n":
            raise ValueError("cannot be a line break")
        return value

    @field_validator("escape_char")
    @classmethod
    def validate_escape_char(cls, value):
        if value is not None and (len(value) != 1 or value in "\r\n"):
            raise ValueError(f"must be a single non line break character, got {value!r}")
        return value

    @field_validator("columns")
    @classmethod
    def validate_unique_column_names(cls, columns):
        """Ensure column names are unique."""
        names = [c.name for c in columns]
        duplicates = [name for name in set(names) if names.count(name) > 1]
        if duplicates:
            raise ValueError(f"Duplicate column names: {', '.join(sorted(duplicates))}")
        return columns

    @model_validator(mode="after")
    def validate_distinct_special_chars(self):
        """The delimiter, quote and escape characters must not clash."""
        if self.delimiter == self.quote_char:
            raise ValueError("delimiter and quote_char must be different")
        if self.escape_char is not None and self.escape_char == self.delimiter:
            raise ValueError("delimiter and escape_char must be different")
        return self

    @classmethod
    def from_dict(cls, config_dict: dict) -> "ProcessorConfig":
        """
        Create ProcessorConfig from a dictionary.

        Raises:
            ValidationError: If configuration is invalid
        """
        return cls.model_validate(config_dict)

    @classmethod
    def from_json_file(cls, config_path: Union[str, Path]) -> "ProcessorConfig":
        """
        Load and validate configuration from a JSON file.

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If file doesn't exist
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, encoding="utf-8") as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)
