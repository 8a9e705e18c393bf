"""Flat-row projection of validation findings.

Every finding becomes one row per referenced record, sharing an
``error_id``. A finding that references nothing still gets one row, with
null entity columns and a null ``reference_index``. Enum members are stored
by name and looked up by name on the way back.
"""

import logging

import polars as pl

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType
from gtfs_canon.core.errors import EntityReference, ValidationError

logger = logging.getLogger(__name__)

ERROR_ROW_SCHEMA: dict[str, pl.DataType] = {
    "error_id": pl.UInt32,
    "error_type": pl.Utf8,
    "severity": pl.Utf8,
    "bad_values": pl.Utf8,
    "reference_index": pl.UInt32,
    "entity_type": pl.Utf8,
    "entity_id": pl.Utf8,
    "sequence_number": pl.Int64,
    "line_number": pl.Int32,
}

# Range of the Int32 line_number column
LINE_NUMBER_MIN = -(2**31)
LINE_NUMBER_MAX = 2**31 - 1

# Derived columns that decoding does not need
DERIVED_COLUMNS = {"severity"}

SUMMARY_SCHEMA: dict[str, pl.DataType] = {
    "error_type": pl.Utf8,
    "severity": pl.Utf8,
    "count": pl.UInt32,
}


def errors_to_frame(errors: list[ValidationError]) -> pl.DataFrame:
    """Flatten findings into rows, one per referenced record.

    Args:
        errors: Findings in report order

    Returns:
        DataFrame with ERROR_ROW_SCHEMA columns

    Raises:
        ValueError: If a line number does not fit the Int32 column
    """
    columns: dict[str, list] = {name: [] for name in ERROR_ROW_SCHEMA}

    def add_row(
        error_id: int,
        error: ValidationError,
        index: int | None,
        ref: EntityReference | None,
    ) -> None:
        line_number = ref.line_number if ref else None
        if line_number is not None and not LINE_NUMBER_MIN <= line_number <= LINE_NUMBER_MAX:
            msg = f"Line number {line_number} of error {error_id} does not fit in Int32"
            raise ValueError(msg)
        columns["error_id"].append(error_id)
        columns["error_type"].append(error.type.name)
        columns["severity"].append(error.severity.name)
        columns["bad_values"].append(error.bad_values)
        columns["reference_index"].append(index)
        columns["entity_type"].append(ref.entity_type.name if ref else None)
        columns["entity_id"].append(ref.id if ref else None)
        columns["sequence_number"].append(ref.sequence_number if ref else None)
        columns["line_number"].append(line_number)

    for error_id, error in enumerate(errors):
        if not error.referenced_entities:
            add_row(error_id, error, None, None)
            continue
        for index, ref in enumerate(error.referenced_entities):
            add_row(error_id, error, index, ref)

    return pl.DataFrame(columns, schema=ERROR_ROW_SCHEMA)


def errors_from_frame(df: pl.DataFrame) -> list[ValidationError]:
    """Rebuild findings from their flat rows.

    Rows are grouped by ``error_id`` and references ordered by
    ``reference_index``. A null ``bad_values`` (CSV stores "" as empty) is
    read back as an empty string.

    Args:
        df: Rows as produced by errors_to_frame

    Returns:
        Findings ordered by error_id

    Raises:
        ValueError: If required columns are missing or a stored error or
            entity type name is unknown
    """
    required = set(ERROR_ROW_SCHEMA) - DERIVED_COLUMNS
    missing = sorted(required - set(df.columns))
    if missing:
        msg = f"Error rows are missing columns: {', '.join(missing)}"
        raise ValueError(msg)

    grouped: dict[int, list[dict]] = {}
    for row in df.sort(["error_id", "reference_index"], maintain_order=True).to_dicts():
        grouped.setdefault(row["error_id"], []).append(row)

    errors = []
    for rows in grouped.values():
        first = rows[0]
        references = tuple(
            EntityReference(
                entity_type=EntityType.from_name(row["entity_type"]),
                id=row["entity_id"],
                sequence_number=row["sequence_number"],
                line_number=row["line_number"],
            )
            for row in rows
            if row["reference_index"] is not None
        )
        errors.append(
            ValidationError(
                ErrorType.from_name(first["error_type"]),
                first["bad_values"] or "",
                references,
            )
        )

    logger.debug("Decoded %s findings from %s rows", len(errors), len(df))
    return errors


def summarize_errors(errors: list[ValidationError]) -> pl.DataFrame:
    """Count findings per error type, most severe first.

    Args:
        errors: Findings to count

    Returns:
        DataFrame with columns error_type, severity and count
    """
    if not errors:
        return pl.DataFrame(schema=SUMMARY_SCHEMA)

    df = pl.DataFrame(
        {
            "error_type": [error.type.name for error in errors],
            "severity": [error.severity.name for error in errors],
            "severity_rank": [error.severity.value for error in errors],
        }
    )
    return (
        df.group_by(["error_type", "severity", "severity_rank"])
        .agg(pl.len().cast(pl.UInt32).alias("count"))
        .sort(
            ["severity_rank", "count", "error_type"],
            descending=[True, True, False],
        )
        .drop("severity_rank")
    )


__all__ = [
    "ERROR_ROW_SCHEMA",
    "errors_from_frame",
    "errors_to_frame",
    "summarize_errors",
]
