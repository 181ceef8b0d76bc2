"""
Row processor: maps CSV lines to typed rows and back.

Rows are plain dicts keyed by column name. Column order is fixed by the
column list and is the same for the header, reading and writing.
"""

import logging
import time
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence

from csvmapper.config_models import ColumnConfig, ProcessorConfig
from csvmapper.converters import get_converter
from csvmapper.errors import ConfigurationError, CsvParseException, ErrorType, ParseError
from csvmapper.models import ColumnInfo, FieldToken, ParsingStats, RowResult, TokenizedLine
from csvmapper.tokenizer import LineSource, LineTokenizer
from csvmapper.writer import LineWriter, WriterField

logger = logging.getLogger(__name__)


def build_column_info(column: ColumnConfig) -> ColumnInfo:
    """Create a configured ColumnInfo from a column definition.

    Raises:
        ConfigurationError: If the converter is unknown or rejects the format
    """
    try:
        converter = get_converter(column.type.value)
    except KeyError as e:
        raise ConfigurationError(f"Column '{column.name}': {e.args[0]}") from e
    try:
        return ColumnInfo(
            column_name=column.name,
            converter=converter,
            format=column.format,
            flags=column.converter_flags,
            required=column.required,
            trim_input=column.trim_input,
        )
    except ValueError as e:
        raise ConfigurationError(f"Column '{column.name}': {e}") from e


def strip_line_ending(raw: str) -> str:
    """Remove one trailing line terminator."""
    if raw.endswith("\r\n"):
        return raw[:-2]
    if raw.endswith(("\n", "\r")):
        return raw[:-1]
    return raw


class RowProcessor:
    """Reads and writes rows for an ordered list of columns.

    Args:
        columns: Configured columns in file order
        delimiter: Field delimiter character
        quote_char: Quote character
        escape_char: Optional escape character
        allow_partial_rows: Keep converting after a column fails and return the row with None
            in the failed columns
        allow_short_lines: Missing trailing fields read as None instead of failing the row
        flag_extra_columns: Report lines with more fields than columns
        first_line_header: read_rows/write_rows expect/produce a header line
        validate_header: read_rows checks the header against the column names
        ignore_blank_lines: read_rows skips empty lines
        continue_on_error: read_rows yields failed rows instead of raising CsvParseException
    """

    def __init__(self, columns: Sequence[ColumnInfo], delimiter: str = ",", quote_char: str = '"',
                 escape_char: Optional[str] = None, allow_partial_rows: bool = False,
                 allow_short_lines: bool = False, flag_extra_columns: bool = False,
                 first_line_header: bool = True, validate_header: bool = True,
                 ignore_blank_lines: bool = True, continue_on_error: bool = False):
        if not columns:
            raise ConfigurationError("At least one column is required")
        names = [c.column_name for c in columns]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate column names: {', '.join(duplicates)}")
        try:
            self.tokenizer = LineTokenizer(delimiter, quote_char, escape_char)
            self.writer = LineWriter(delimiter, quote_char, escape_char)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self.columns = tuple(columns)
        self.allow_partial_rows = allow_partial_rows
        self.allow_short_lines = allow_short_lines
        self.flag_extra_columns = flag_extra_columns
        self.first_line_header = first_line_header
        self.validate_header = validate_header
        self.ignore_blank_lines = ignore_blank_lines
        self.continue_on_error = continue_on_error
        self.stats = ParsingStats()

    @classmethod
    def from_config(cls, config: ProcessorConfig) -> "RowProcessor":
        """Build a processor from a validated configuration."""
        columns = [build_column_info(c) for c in config.columns]
        return cls(
            columns,
            delimiter=config.delimiter,
            quote_char=config.quote_char,
            escape_char=config.escape_char,
            allow_partial_rows=config.allow_partial_rows,
            allow_short_lines=config.allow_short_lines,
            flag_extra_columns=config.flag_extra_columns,
            first_line_header=config.first_line_header,
            validate_header=config.validate_header,
            ignore_blank_lines=config.ignore_blank_lines,
            continue_on_error=config.continue_on_error,
        )

    @property
    def column_names(self) -> List[str]:
        return [c.column_name for c in self.columns]

    # Reading

    def read_row(self, line: str, line_number: int, next_line: Optional[LineSource] = None) -> RowResult:
        """Convert one logical line into a row.

        Args:
            line: Physical line without its terminator
            line_number: 1-based line number
            next_line: Source of further physical lines for multi-line quoted fields

        Returns:
            RowResult; ``row`` is None if the row failed and partial rows are not allowed
        """
        parse_error = ParseError()
        tokenized = self.tokenizer.tokenize(line, line_number, parse_error, next_line)
        if tokenized is None:
            return RowResult(row=None, errors=[parse_error], line_number=line_number,
                             lines_consumed=parse_error.line_number - line_number + 1)

        row: Dict[str, Any] = {}
        errors: List[ParseError] = []
        tokens = tokenized.fields
        for index, column in enumerate(self.columns):
            if index >= len(tokens):
                if not self.allow_short_lines:
                    errors.append(self._truncated_error(column, tokenized, line_number))
                for missing in self.columns[index:]:
                    row[missing.column_name] = None
                break
            value, error = self._read_column(column, tokens[index], tokenized.line)
            row[column.column_name] = value
            if error is not None:
                errors.append(error)
                if not self.allow_partial_rows:
                    break

        if len(tokens) > len(self.columns) and self.flag_extra_columns and (not errors or self.allow_partial_rows):
            extra = tokens[len(self.columns)]
            errors.append(self._error(
                ErrorType.TOO_MANY_COLUMNS, extra.line_number, extra.line_pos, tokenized.line,
                f"line has {len(tokens)} fields, expected {len(self.columns)}"
            ))

        if errors and not self.allow_partial_rows:
            row = None
        return RowResult(row=row, errors=errors, line_number=line_number,
                         lines_consumed=tokenized.consumed_extra_lines + 1)

    def _read_column(self, column: ColumnInfo, token: FieldToken, line: str):
        value = token.value
        if column.trim_input or column.converter.is_always_trim_input():
            value = value.strip()

        parse_error = ParseError()
        if not value and column.required:
            parse_error.error_type = ErrorType.REQUIRED_FIELD
            parse_error.line_pos = token.line_pos
            parse_error.message = "required column is empty"
            result = None
        else:
            result = column.converter.string_to_value(line, token.line_number, token.line_pos,
                                                      column, value, parse_error)
        if not parse_error.is_error():
            return result, None
        parse_error.line_number = token.line_number
        parse_error.column_name = column.column_name
        parse_error.line = line
        return None, parse_error

    def _truncated_error(self, column: ColumnInfo, tokenized: TokenizedLine, line_number: int) -> ParseError:
        last_line = tokenized.line.rsplit("\n", 1)[-1]
        error = self._error(
            ErrorType.TRUNCATED_COLUMN, line_number + tokenized.consumed_extra_lines, len(last_line),
            tokenized.line, f"line has {len(tokenized.fields)} fields, expected {len(self.columns)}"
        )
        error.column_name = column.column_name
        return error

    @staticmethod
    def _error(error_type: ErrorType, line_number: int, line_pos: int, line: str, message: str) -> ParseError:
        error = ParseError()
        error.error_type = error_type
        error.line_number = line_number
        error.line_pos = line_pos
        error.line = line
        error.message = message
        return error

    def validate_header_line(self, line: str, line_number: int = 1,
                             next_line: Optional[LineSource] = None) -> List[ParseError]:
        """Check a header line against the column names.

        Returns:
            List of errors, empty if the header matches
        """
        parse_error = ParseError()
        tokenized = self.tokenizer.tokenize(line, line_number, parse_error, next_line)
        if tokenized is None:
            return [parse_error]

        errors = []
        tokens = tokenized.fields
        for index, column in enumerate(self.columns):
            if index >= len(tokens):
                error = self._error(ErrorType.INVALID_HEADER, line_number, len(line), tokenized.line,
                                    f"header is missing column '{column.column_name}'")
                error.column_name = column.column_name
                errors.append(error)
                break
            token = tokens[index]
            if token.value != column.column_name:
                error = self._error(ErrorType.INVALID_HEADER, token.line_number, token.line_pos, tokenized.line,
                                    f"expected column '{column.column_name}' but got '{token.value}'")
                error.column_name = column.column_name
                errors.append(error)
        for token in tokens[len(self.columns):]:
            errors.append(self._error(ErrorType.INVALID_HEADER, token.line_number, token.line_pos,
                                      tokenized.line, f"unexpected header column '{token.value}'"))
        return errors

    def read_rows(self, lines: Iterable[str]) -> Iterator[RowResult]:
        """Read rows from physical lines.

        Args:
            lines: Physical lines, with or without line terminators

        Yields:
            RowResult per logical line (and one for a bad header)

        Raises:
            CsvParseException: On the first failed row unless continue_on_error is set
        """
        iterator = iter(lines)
        line_number = 0

        def next_line() -> Optional[str]:
            nonlocal line_number
            raw = next(iterator, None)
            if raw is None:
                return None
            line_number += 1
            return strip_line_ending(raw)

        self.stats = ParsingStats()
        try:
            if self.first_line_header:
                header = next_line()
                if header is None:
                    error = self._error(ErrorType.NO_HEADER, 1, 0, "", "no header line found")
                    yield from self._handle_failure(RowResult(row=None, errors=[error], line_number=1), count_row=False)
                    return
                # Always tokenized: a quoted header name may span several lines
                start = line_number
                errors = self.validate_header_line(header, start, next_line)
                if errors and self.validate_header:
                    yield from self._handle_failure(RowResult(row=None, errors=errors, line_number=start),
                                                    count_row=False)

            while True:
                raw = next_line()
                if raw is None:
                    break
                start = line_number
                if raw == "" and self.ignore_blank_lines:
                    logger.debug(f"Skipping blank line {start}")
                    self.stats.skipped_rows += 1
                    continue

                self.stats.total_rows += 1
                result = self.read_row(raw, start, next_line)
                if result.ok:
                    self.stats.success_rows += 1
                    yield result
                else:
                    yield from self._handle_failure(result)
        finally:
            self.stats.end_time = time.time()

    def _handle_failure(self, result: RowResult, count_row: bool = True) -> Iterator[RowResult]:
        if count_row:
            self.stats.failed_rows += 1
        self.stats.parse_errors += len(result.errors)
        for error in result.errors:
            logger.warning(f"Rejected line {result.line_number}: {error}")
        if not self.continue_on_error:
            raise CsvParseException(result.errors, result.line_number)
        yield result

    # Writing

    def build_header_line(self) -> str:
        return self.writer.write_header(self.column_names)

    def write_row(self, row: Mapping[str, Any]) -> str:
        """Convert a row into one CSV line (without line terminator)."""
        fields = []
        for column in self.columns:
            converter = column.converter
            text = converter.value_to_string(column, row.get(column.column_name))
            fields.append(WriterField(text, converter.is_needs_quotes(column.config_info),
                                      converter.is_always_trim_input()))
        return self.writer.write(fields)

    def write_rows(self, rows: Iterable[Mapping[str, Any]], write_header: Optional[bool] = None) -> Iterator[str]:
        """Convert rows into lines, preceded by the header line if requested."""
        if write_header is None:
            write_header = self.first_line_header
        if write_header:
            yield self.build_header_line()
        for row in rows:
            yield self.write_row(row)
