"""
Data models and structures for the CSV mapper.
"""

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from csvmapper.errors import ParseError

if TYPE_CHECKING:
    from csvmapper.converters.base import Converter


@dataclass(frozen=True)
class ColumnInfo:
    """Static configuration of one CSV column.

    The converter configuration is derived once from format, flags and the
    column itself and cached in ``config_info``.
    """
    column_name: str
    converter: "Converter"
    format: Optional[str] = None
    flags: int = 0
    required: bool = False
    trim_input: bool = False
    config_info: Any = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "config_info", self.converter.configure(self.format, self.flags, self))

    @property
    def needs_quotes(self) -> bool:
        return self.converter.is_needs_quotes(self.config_info)


@dataclass(frozen=True)
class FieldToken:
    """Raw text of one field before conversion."""
    value: str
    quoted: bool = False
    line_pos: int = 0
    line_number: int = 1


@dataclass
class TokenizedLine:
    """Fields of one logical line."""
    fields: List[FieldToken]
    consumed_extra_lines: int = 0
    line: str = ""

    @property
    def values(self) -> List[str]:
        return [f.value for f in self.fields]


@dataclass
class RowResult:
    """Outcome of reading one logical line."""
    row: Optional[Dict[str, Any]]
    errors: List[ParseError] = field(default_factory=list)
    line_number: int = 1
    lines_consumed: int = 1

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class ParsingStats:
    """Parsing statistics."""
    total_rows: int = 0
    success_rows: int = 0
    failed_rows: int = 0
    skipped_rows: int = 0  # Blank lines that were ignored
    parse_errors: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def duration(self) -> float:
        """Get parsing duration in seconds."""
        end = self.end_time or time.time()
        return end - self.start_time

    @property
    def rows_per_second(self) -> float:
        """Get processing throughput."""
        duration = self.duration
        return self.success_rows / duration if duration > 0 else 0
