"""
csvmapper: map typed rows to and from CSV lines with a declarative column list.
"""

__version__ = "1.0.0"

from csvmapper.config_models import ColumnConfig, FieldType, ProcessorConfig
from csvmapper.converters import Converter, get_converter, register_converter
from csvmapper.errors import ConfigurationError, CsvParseException, ErrorType, ParseError
from csvmapper.models import ColumnInfo, FieldToken, ParsingStats, RowResult, TokenizedLine
from csvmapper.processor import RowProcessor
from csvmapper.tokenizer import LineTokenizer
from csvmapper.writer import LineWriter, WriterField

__all__ = [
    "ProcessorConfig",
    "ColumnConfig",
    "FieldType",
    "ColumnInfo",
    "Converter",
    "get_converter",
    "register_converter",
    "ErrorType",
    "ParseError",
    "ConfigurationError",
    "CsvParseException",
    "FieldToken",
    "TokenizedLine",
    "RowResult",
    "ParsingStats",
    "LineTokenizer",
    "LineWriter",
    "WriterField",
    "RowProcessor",
]
