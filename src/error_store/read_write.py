"""Read and write validation findings as CSV or Parquet files."""

import logging
from pathlib import Path

import polars as pl

from error_store.rows import ERROR_ROW_SCHEMA, errors_from_frame, errors_to_frame
from gtfs_canon.core.errors import ValidationError

logger = logging.getLogger(__name__)


def write_errors(
    errors: list[ValidationError],
    path: Path | str,
    create_dirs: bool = True,
) -> pl.DataFrame:
    """Write findings to a .csv or .parquet file.

    Args:
        errors: Findings to write
        path: Output file path
        create_dirs: Create missing parent directories

    Returns:
        The rows that were written

    Raises:
        ValueError: If the file suffix is not supported
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in (".csv", ".parquet"):
        msg = f"Unsupported file format for validation errors: {file_path}"
        raise ValueError(msg)

    df = errors_to_frame(errors)
    logger.info("Writing %s findings (%s rows) to:\n%s...", len(errors), len(df), file_path)

    if create_dirs:
        file_path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == ".csv":
        df.write_csv(file_path)
    else:
        df.write_parquet(file_path)

    return df


def load_errors(path: Path | str) -> list[ValidationError]:
    """Load findings written by write_errors.

    Raises:
        FileNotFoundError: If the path does not exist
        ValueError: If the file suffix is not supported
    """
    file_path = Path(path)
    if not file_path.exists():
        # Trace from the file up to the first existing directory
        trace_path = file_path
        broke_at = file_path.name
        while not trace_path.exists() and trace_path != trace_path.parent:
            broke_at = trace_path.name
            trace_path = trace_path.parent
        msg = (
            f"Validation error file does not exist at {file_path}. "
            f"Possibly broken at: {broke_at} in {trace_path}?"
        )
        raise FileNotFoundError(msg)

    logger.info("Loading validation errors from %s...", file_path)
    suffix = file_path.suffix.lower()
    if suffix == ".csv":
        df = pl.read_csv(file_path, schema_overrides=ERROR_ROW_SCHEMA)
    elif suffix == ".parquet":
        df = pl.read_parquet(file_path)
    else:
        msg = f"Unsupported file format for validation errors: {file_path}"
        raise ValueError(msg)

    return errors_from_frame(df)


__all__ = ["load_errors", "write_errors"]
