"""
Command-line interface for csvmapper.

This module handles CLI argument parsing, logging configuration,
and user interaction.
"""

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from csvmapper.errors import ConfigurationError
from csvmapper.orchestrator import FileProcessingError, process_files

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """CLI entry point.

    Returns:
        Exit code: 0 = success, 1 = all files failed, 2 = partial failure
    """
    parser = argparse.ArgumentParser(
        description="Check CSV files against a declarative column mapping",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Report every parse error
  csvmapper --config columns.json orders.csv

  # Rewrite the valid rows in normalized form
  csvmapper --config columns.json --out ./clean orders.csv
        """
    )
    parser.add_argument("--config", required=True, type=Path, help="Column configuration JSON file")
    parser.add_argument("--out", type=Path, help="Output directory for normalized files")
    parser.add_argument("input_files", nargs="+", type=Path, help="Input files")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    parser.add_argument("--fail-fast", action="store_true",
                        help="Stop processing on first file error (default: continue)")

    args = parser.parse_args(argv)
    logging.getLogger().setLevel(args.log_level)

    try:
        file_stats, row_errors, file_errors = process_files(
            args.config,
            args.input_files,
            args.out,
            fail_fast=args.fail_fast
        )
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except (ValidationError, ConfigurationError) as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except FileProcessingError as e:
        logger.error(f"File processing error: {e}")
        return 1

    logger.info("=" * 80)
    for name, pstats in sorted(file_stats.items()):
        logger.info(f"  {name}:")
        logger.info(f"    Rows: {pstats.total_rows:,}")
        logger.info(f"    Successful: {pstats.success_rows:,}")
        logger.info(f"    Failed: {pstats.failed_rows:,}")
        if pstats.skipped_rows > 0:
            logger.info(f"    Blank lines skipped: {pstats.skipped_rows:,}")
        logger.info(f"    Throughput: {pstats.rows_per_second:.0f} rows/sec")
        for message in row_errors.get(name, []):
            logger.warning(f"    {message}")

    if file_errors:
        logger.error("=" * 80)
        logger.error(f"FILE PROCESSING ERRORS ({len(file_errors)} files failed):")
        for file_path, error_msg in file_errors.items():
            logger.error(f"  {file_path}: {error_msg}")
    logger.info("=" * 80)

    failed_file_count = len(file_errors)
    if failed_file_count == 0:
        return 0
    if failed_file_count == len(args.input_files):
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
