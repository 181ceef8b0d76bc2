"""
Orchestration logic for checking and normalizing CSV files in batch.

This module contains the file-level loop, independent of CLI concerns.
"""

import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from csvmapper.config_models import ProcessorConfig
from csvmapper.errors import CsvParseException
from csvmapper.file_io import CsvFileWriter, read_file
from csvmapper.models import ParsingStats
from csvmapper.processor import RowProcessor

logger = logging.getLogger(__name__)


class FileProcessingError(Exception):
    """Exception raised when a file fails to process."""
    pass


def process_file(input_file: Path, processor: RowProcessor, encoding: str = "utf-8",
                 output_dir: Optional[Path] = None) -> Tuple[ParsingStats, List[str]]:
    """Read one file, optionally rewriting its valid rows in normalized form.

    Returns:
        Tuple: (parsing stats, list of row error messages)

    Raises:
        CsvParseException: If a row fails and the processor does not continue on error
        OSError: If the file cannot be read or written
    """
    row_errors: List[str] = []
    processor.stats = ParsingStats()
    writer =CsvFileWriter(output_dir / input_file.name, processor, encoding=encoding) if output_dir else None
    try:
        for result in read_file(input_file, processor, encoding=encoding):
            if result.errors:
                row_errors.extend(str(e) for e in result.errors)
            if writer is not None and result.row is not None and result.ok:
                writer.write_row(result.row)
    finally:
        if writer is not None:
            writer.close()
    return processor.stats, row_errors


def process_files(
    config_path: Path,
    input_files: List[Path],
    output_dir: Optional[Path] = None,
    fail_fast: bool = False
) -> Tuple[Dict[str, ParsingStats], Dict[str, List[str]], Dict[str, str]]:
    """Check files against a column configuration.

    Args:
        config_path: Path to configuration JSON file
        input_files: List of input files to process
        output_dir: If given, valid rows are rewritten to a file of the same name here
        fail_fast: If True, stop on first file error (default: continue)

    Returns:
        Tuple: (stats per file, row errors per file, file errors)

    Raises:
        ValidationError: If the configuration is invalid
        ConfigurationError: If a column cannot be configured
        FileNotFoundError: If the configuration file is missing
    """
    start_time = time.time()

    logger.info(f"Loading configuration from {config_path}")
    config = ProcessorConfig.from_json_file(config_path)
    processor = RowProcessor.from_config(config)
    logger.info(f"Configuration valid: {len(processor.columns)} column(s), "
                f"delimiter {config.delimiter!r}, fail-fast: {fail_fast}")

    file_stats: Dict[str, ParsingStats] = {}
    row_errors: Dict[str, List[str]] = {}
    file_errors: Dict[str, str] = {}

    for file_idx, input_file in enumerate(input_files, 1):
        file_start = time.time()
        if not input_file.exists():
            error_msg = f"Input file not found: {input_file}"
            logger.error(f"[{file_idx}/{len(input_files)}] {error_msg}")
            file_errors[str(input_file)] = error_msg
            if fail_fast:
                raise FileProcessingError(error_msg)
            continue

        logger.info(f"[{file_idx}/{len(input_files)}] Processing: {input_file.name}")
        try:
            stats, errors = process_file(input_file, processor, config.encoding, output_dir)
            file_stats[str(input_file)] = stats
            if errors:
                row_errors[str(input_file)] = errors
            logger.info(f"Completed {input_file.name} in {time.time() - file_start:.2f}s")
        except (CsvParseException, OSError, UnicodeDecodeError) as e:
            error_msg = f"{type(e).__name__}: {e}"
            logger.error(f"Failed {input_file.name} after {time.time() - file_start:.2f}s: {error_msg}")
            file_errors[str(input_file)] = error_msg
            file_stats[str(input_file)] = processor.stats
            if fail_fast:
                raise FileProcessingError(f"File processing failed: {error_msg}") from e

    logger.info(f"Total processing time: {time.time() - start_time:.2f}s")
    return file_stats, row_errors, file_errors
