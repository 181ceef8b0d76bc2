"""
File helpers around RowProcessor with proper resource management.
"""

import logging
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from csvmapper.models import RowResult
from csvmapper.processor import RowProcessor

logger = logging.getLogger(__name__)


def read_file(path: Path, processor: RowProcessor, encoding: str = "utf-8") -> Iterator[RowResult]:
    """Read rows from a CSV file.

    The file is opened without newline translation so line breaks inside
    quoted fields reach the tokenizer unchanged.

    Raises:
        CsvParseException: On the first failed row unless the processor continues on error
    """
    with open(path, "r", encoding=encoding, newline="") as f:
        yield from processor.read_rows(f)
    stats = processor.stats
    logger.info(f"Read {path.name}: {stats.success_rows:,} rows ok, {stats.failed_rows:,} failed, "
                f"{stats.skipped_rows:,} blank lines skipped")


class CsvFileWriter:
    """Writes rows to a CSV file through a RowProcessor.

    Args:
        path: Output file
        processor: Processor providing columns and dialect
        encoding: Output encoding
        flush_every: Flush to disk every N rows (0 = flush on close only, None = flush every row).
    """

    def __init__(self, path: Path, processor: RowProcessor, encoding: str = "utf-8",
                 flush_every: Optional[int] = 1000, line_terminator: str = "\n"):
        self.path = path
        self.processor = processor
        self.encoding = encoding
        self.flush_every = flush_every
        self.line_terminator = line_terminator
        self.row_count = 0
        self._fp = None
        self._closed = False

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensures the file is closed."""
        self.close()
        return False  # Don't suppress exceptions

    def _open(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fp = self.path.open("w", newline="", encoding=self.encoding)
        try:
            if self.processor.first_line_header:
                fp.write(self.processor.build_header_line() + self.line_terminator)
                fp.flush()
        except Exception:
            fp.close()
            raise
        self._fp = fp

    def write_row(self, row: Mapping[str, Any]) -> None:
        """Write one row, writing the header first if this is the first row."""
        if self._closed:
            raise RuntimeError("CsvFileWriter is closed")
        if self._fp is None:
            self._open()

        self._fp.write(self.processor.write_row(row) + self.line_terminator)
        self.row_count += 1

        should_flush = (
            self.flush_every is None or
            (self.flush_every > 0 and self.row_count % self.flush_every == 0)
        )
        if should_flush:
            self._fp.flush()

    def close(self) -> None:
        """Close the file, creating it with just a header if no row was written."""
        if self._closed:
            return
        try:
            if self._fp is None:
                self._open()
            self._fp.flush()
            self._fp.close()
        finally:
            self._closed = True
            self._fp = None
