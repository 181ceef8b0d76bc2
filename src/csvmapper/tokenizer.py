"""
Line tokenizer: splits one logical CSV line into raw field tokens.

A logical line can span several physical lines when a quoted field contains
line breaks. The tokenizer asks the caller for more physical lines through a
``next_line`` callable and joins them with "\\n".
"""

import logging
from enum import Enum
from typing import Callable, List, Optional

from csvmapper.errors import ErrorType, ParseError
from csvmapper.models import FieldToken, TokenizedLine

logger = logging.getLogger(__name__)

LineSource = Callable[[], Optional[str]]


class TokenizerState(Enum):
    UNQUOTED_FIELD = "unquoted_field"
    QUOTED_FIELD = "quoted_field"
    AFTER_QUOTE = "after_quote"  # Seen a quote inside a quoted field
    ESCAPED = "escaped"  # Next character is taken literally


def check_special_chars(delimiter: str, quote_char: str, escape_char: Optional[str]) -> None:
    """Validate the delimiter, quote and escape characters.

    Raises:
        ValueError: If a character is not exactly one character long or two of them clash
    """
    for name, char in (("delimiter", delimiter), ("quote character", quote_char), ("escape character", escape_char)):
        if char is None and name == "escape character":
            continue
        if not isinstance(char, str) or len(char) != 1:
            raise ValueError(f"The {name} must be a single character, got {char!r}")
        if char in "\r\n":
            raise ValueError(f"The {name} cannot be a line break")
    if delimiter == quote_char:
        raise ValueError("The delimiter and quote character must be different")
    if escape_char is not None and escape_char == delimiter:
        raise ValueError("The delimiter and escape character must be different")


class LineTokenizer:
    """Single-pass state machine over the characters of a line.

    Args:
        delimiter: Field separator
        quote_char: Quote character; a doubled quote inside a quoted field is a literal quote
        escape_char: Optional escape character; the character after it is taken literally
    """

    def __init__(self, delimiter: str = ",", quote_char: str = '"', escape_char: Optional[str] = None):
        check_special_chars(delimiter, quote_char, escape_char)
        self.delimiter = delimiter
        self.quote_char = quote_char
        # Doubled quotes already cover escaping the quote character
        self.escape_char = escape_char if escape_char != quote_char else None

    def tokenize(self, raw_line: str, line_number: int, parse_error: ParseError,
                 next_line: Optional[LineSource] = None) -> Optional[TokenizedLine]:
        """Split a line into field tokens.

        Args:
            raw_line: Physical line without its line terminator
            line_number: 1-based number of the physical line
            parse_error: Filled in if the line is malformed
            next_line: Returns the next physical line, or None at end of input

        Returns:
            TokenizedLine, or None if the line could not be tokenized
        """
        if raw_line == "":
            return TokenizedLine(fields=[], consumed_extra_lines=0, line="")

        fields: List[FieldToken] = []
        buffer: List[str] = []
        physical_lines = [raw_line]
        line = raw_line
        current_line_number = line_number
        consumed_extra_lines = 0

        state = TokenizerState.UNQUOTED_FIELD
        resume_state = TokenizerState.UNQUOTED_FIELD
        quoted = False
        field_pos = 0
        field_line_number = line_number
        pos = 0

        while True:
            if pos >= len(line):
                in_quotes = (state is TokenizerState.QUOTED_FIELD or
                             (state is TokenizerState.ESCAPED and resume_state is TokenizerState.QUOTED_FIELD))
                if in_quotes:
                    more = next_line() if next_line is not None else None
                    if more is None:
                        return self._fail(parse_error, current_line_number, max(pos - 1, 0),
                                          "\n".join(physical_lines), "unterminated quoted field")
                    buffer.append("\n")
                    if state is TokenizerState.ESCAPED:
                        state = resume_state
                    physical_lines.append(more)
                    line = more
                    pos = 0
                    current_line_number += 1
                    consumed_extra_lines += 1
                    continue
                if state is TokenizerState.ESCAPED:
                    return self._fail(parse_error, current_line_number, max(pos - 1, 0),
                                      "\n".join(physical_lines), "escape character at end of line")
                fields.append(FieldToken("".join(buffer), quoted, field_pos, field_line_number))
                break

            ch = line[pos]
            if state is TokenizerState.ESCAPED:
                buffer.append(ch)
                state = resume_state
            elif state is TokenizerState.QUOTED_FIELD:
                if ch == self.escape_char:
                    resume_state = state
                    state = TokenizerState.ESCAPED
                elif ch == self.quote_char:
                    state = TokenizerState.AFTER_QUOTE
                else:
                    buffer.append(ch)
            elif state is TokenizerState.AFTER_QUOTE:
                if ch == self.quote_char:
                    buffer.append(ch)
                    state = TokenizerState.QUOTED_FIELD
                elif ch == self.delimiter:
                    fields.append(FieldToken("".join(buffer), quoted, field_pos, field_line_number))
                    buffer = []
                    quoted = False
                    field_pos = pos + 1
                    field_line_number = current_line_number
                    state = TokenizerState.UNQUOTED_FIELD
                else:
                    return self._fail(parse_error, current_line_number, pos, "\n".join(physical_lines),
                                      f"unexpected character {ch!r} after closing quote")
            else:
                if ch == self.delimiter:
                    fields.append(FieldToken("".join(buffer), quoted, field_pos, field_line_number))
                    buffer = []
                    field_pos = pos + 1
                    field_line_number = current_line_number
                elif ch == self.escape_char:
                    resume_state = state
                    state = TokenizerState.ESCAPED
                elif ch == self.quote_char and pos == field_pos and current_line_number == field_line_number:
                    quoted = True
                    state = TokenizerState.QUOTED_FIELD
                else:
                    buffer.append(ch)
            pos += 1

        if consumed_extra_lines:
            logger.debug(f"Line {line_number} continued over {consumed_extra_lines} extra line(s)")
        return TokenizedLine(fields=fields, consumed_extra_lines=consumed_extra_lines,
                             line="\n".join(physical_lines))

    @staticmethod
    def _fail(parse_error: ParseError, line_number: int, line_pos: int, line: str, message: str) -> None:
        parse_error.error_type = ErrorType.INVALID_FORMAT
        parse_error.line_number = line_number
        parse_error.line_pos = line_pos
        parse_error.line = line
        parse_error.message = message
        return None
