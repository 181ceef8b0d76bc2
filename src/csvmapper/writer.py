"""
Line writer: joins field strings into one quoted and escaped CSV line.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from csvmapper.tokenizer import check_special_chars


@dataclass(frozen=True)
class WriterField:
    """One field handed to the writer."""
    value: Optional[str]
    needs_quotes: bool = False
    always_trim: bool = False


class LineWriter:
    """Writes lines that LineTokenizer reads back to the same field strings.

    A field is quoted when its converter asks for it or when it contains the
    delimiter, the quote character or a line break. Quotes inside a quoted
    field are doubled. A None value is written as nothing, or as an empty
    quoted field when quotes are required. A line holding a single empty
    field is always written as an empty quoted field.
    """

    def __init__(self, delimiter: str = ",", quote_char: str = '"', escape_char: Optional[str] = None):
        check_special_chars(delimiter, quote_char, escape_char)
        self.delimiter = delimiter
        self.quote_char = quote_char
        self.escape_char = escape_char if escape_char != quote_char else None
        self._special = (delimiter, quote_char, "\r", "\n")

    def write(self, fields: Sequence[WriterField]) -> str:
        """Build one line (without line terminator) from the fields."""
        formatted = [self.format_field(f) for f in fields]
        if len(formatted) == 1 and formatted[0] == "":
            # A bare empty line would read back as zero fields
            return self.quote_char * 2
        return self.delimiter.join(formatted)

    def write_header(self, names: Iterable[str]) -> str:
        """Build a header line from column names."""
        return self.write([WriterField(name) for name in names])

    def format_field(self, field: WriterField) -> str:
        value = field.value
        if value is None:
            return self.quote_char * 2 if field.needs_quotes else ""
        if field.always_trim:
            value = value.strip()
        if self.escape_char is not None:
            value = value.replace(self.escape_char, self.escape_char * 2)
        if field.needs_quotes or self._requires_quotes(value):
            return self.quote_char + value.replace(self.quote_char, self.quote_char * 2) + self.quote_char
        return value

    def _requires_quotes(self, value: str) -> bool:
        return any(char in value for char in self._special)
