"""Export a run's findings according to a configuration file."""

import logging
from pathlib import Path

import polars as pl

from error_store.config import load_config
from error_store.logger import setup_logging
from error_store.read_write import write_errors
from error_store.rows import summarize_errors
from gtfs_canon.core.errors import ValidationError

logger = logging.getLogger(__name__)


def export_errors(
    config_path: Path | str,
    errors: list[ValidationError],
) -> pl.DataFrame:
    """Filter findings by severity and write them where the config says.

    Args:
        config_path: Path to the YAML export configuration
        errors: Findings from the validation passes

    Returns:
        The rows that were written
    """
    config = load_config(config_path)
    setup_logging(log_file=config.log_file)

    kept = [error for error in errors if error.severity >= config.min_severity]
    if len(kept) < len(errors):
        logger.info(
            "Dropped %s findings below %s",
            len(errors) - len(kept),
            config.min_severity.name,
        )

    for row in summarize_errors(kept).iter_rows(named=True):
        logger.info("%-8s %-40s %s", row["severity"], row["error_type"], row["count"])

    return write_errors(kept, config.output_path)


__all__ = ["export_errors"]
