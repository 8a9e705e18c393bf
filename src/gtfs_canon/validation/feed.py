"""Load a feed directory and run every validation pass over it."""

import logging
import time
from pathlib import Path

import polars as pl

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType
from gtfs_canon.core.errors import ValidationError
from gtfs_canon.models.gtfs import MODELS, Entity
from gtfs_canon.validation.relational import check_duplicate_ids, check_references
from gtfs_canon.validation.row import SOURCE_LINE_COLUMN, parse_entities
from gtfs_canon.validation.table import check_required_columns, check_required_tables

logger = logging.getLogger(__name__)

# (child table, foreign-key field, parent tables whose ids the key may match)
REFERENCES: list[tuple[EntityType, str, tuple[EntityType, ...]]] = [
    (EntityType.ROUTE, "agency_id", (EntityType.AGENCY,)),
    (EntityType.TRIP, "route_id", (EntityType.ROUTE,)),
    (EntityType.TRIP, "service_id", (EntityType.CALENDAR, EntityType.CALENDAR_DATE)),
    (EntityType.STOP_TIME, "trip_id", (EntityType.TRIP,)),
    (EntityType.STOP_TIME, "stop_id", (EntityType.STOP,)),
    (EntityType.FREQUENCY, "trip_id", (EntityType.TRIP,)),
]

# Tables whose ids identify a single record
UNIQUE_ID_TABLES = (
    EntityType.AGENCY,
    EntityType.CALENDAR,
    EntityType.ROUTE,
    EntityType.STOP,
    EntityType.TRIP,
    EntityType.STOP_TIME,
    EntityType.SHAPE,
)

# Commas outside double-quoted runs separate fields
QUOTED_RUN = r'"[^"]*"'


def read_table(
    entity_type: EntityType,
    path: Path,
) -> tuple[pl.DataFrame | None, list[ValidationError]]:
    """Read one feed file, setting aside rows whose field count is wrong.

    Every line is first counted against the header. Rows with too many or
    too few fields are reported by line and left out of the table; the
    remaining rows are read as strings with their physical line number in
    a ``source_line`` column. Blank lines are skipped.

    Args:
        entity_type: Category of the records in the file
        path: The ``<table>.txt`` file

    Returns:
        Tuple of (table or None if the file has no header, findings)
    """
    lines = pl.DataFrame(
        {"text": path.read_text(encoding="utf-8-sig").splitlines()},
        schema={"text": pl.Utf8},
    )
    lines = (
        lines.with_row_index(SOURCE_LINE_COLUMN, offset=1)
        .filter(pl.col("text").str.strip_chars() != "")
        .with_columns(
            field_count=pl.col("text")
            .str.replace_all(QUOTED_RUN, "")
            .str.count_matches(",", literal=True)
            + 1
        )
    )

    if lines.is_empty():
        logger.warning("File %s has no header row", path.name)
        error = ValidationError.without_entities(
            ErrorType.TABLE_MISSING_COLUMN_HEADERS,
            {"table": entity_type.table_name},
        )
        return None, [error]

    header = lines.row(0, named=True)
    rows = lines.slice(1)
    expected = header["field_count"]
    ragged = rows.filter(pl.col("field_count") != expected)
    errors = [
        ValidationError.from_line(
            ErrorType.WRONG_NUMBER_OF_FIELDS,
            {"expected": expected, "found": row["field_count"]},
            entity_type,
            row[SOURCE_LINE_COLUMN],
        )
        for row in ragged.iter_rows(named=True)
    ]
    if errors:
        logger.warning(
            "File %s: %s rows with the wrong number of fields",
            path.name,
            len(errors),
        )

    rows = rows.filter(pl.col("field_count") == expected)
    content = "\n".join([header["text"], *rows["text"]]) + "\n"
    df = pl.read_csv(content.encode("utf-8"), infer_schema_length=0)
    df = df.with_columns(rows[SOURCE_LINE_COLUMN].cast(pl.Int64))
    return df, errors


def load_feed(
    feed_dir: Path | str,
) -> tuple[dict[str, pl.DataFrame], list[ValidationError]]:
    """Read every recognized ``<table>.txt`` file from a feed directory.

    File names are matched to record categories by table name; other files
    are ignored. All columns are read as strings so ids keep leading zeros;
    the record models coerce numeric fields.

    Args:
        feed_dir: Directory holding the unzipped feed

    Returns:
        Tuple of (tables keyed by table name, findings from reading them).
        Absent files and files without a header are absent keys.

    Raises:
        FileNotFoundError: If the directory does not exist
    """
    feed_path = Path(feed_dir)
    if not feed_path.is_dir():
        msg = f"Feed directory does not exist: {feed_path}"
        raise FileNotFoundError(msg)

    tables = {}
    errors: list[ValidationError] = []
    for path in sorted(feed_path.glob("*.txt")):
        entity_type = EntityType.from_label(path.stem)
        if entity_type not in MODELS:
            logger.info("Ignoring unrecognized file %s", path.name)
            continue
        logger.info("Loading %s...", path.name)
        df, read_errors = read_table(entity_type, path)
        errors.extend(read_errors)
        if df is not None:
            tables[entity_type.table_name] = df
    return tables, errors


def validate_feed(tables: dict[str, pl.DataFrame]) -> list[ValidationError]:
    """Run all validation passes over a loaded feed.

    Runs in this order:
    1. Required tables
    2. Required columns (tables missing one are not parsed further)
    3. Row parsing into records
    4. Duplicate ids
    5. References between tables (skipped when no parent table is present)

    Args:
        tables: Tables keyed by table name

    Returns:
        All findings, in pass order
    """
    start_time = time.time()
    errors = check_required_tables(tables)
    records: dict[EntityType, list[Entity]] = {}

    for entity_type in MODELS:
        df = tables.get(entity_type.table_name)
        if df is None:
            continue

        column_errors = check_required_columns(entity_type, df)
        errors.extend(column_errors)
        if column_errors:
            logger.warning(
                "Table '%s' is missing required columns - skipping row checks",
                entity_type.table_name,
            )
            continue

        entities, row_errors = parse_entities(entity_type, df)
        errors.extend(row_errors)
        records[entity_type] = entities

    for entity_type in UNIQUE_ID_TABLES:
        if entity_type in records:
            errors.extend(check_duplicate_ids(records[entity_type]))

    for child_type, field, parent_types in REFERENCES:
        available = [parent for parent in parent_types if parent in records]
        if child_type not in records or not available:
            logger.debug(
                "Skipping reference check %s.%s: table not available",
                child_type.table_name,
                field,
            )
            continue
        errors.extend(
            check_references(
                records[child_type],
                [record for parent in available for record in records[parent]],
                field,
                ErrorType.REFERENTIAL_INTEGRITY,
            )
        )

    elapsed = time.time() - start_time
    logger.info(
        "Feed validated in %.2fs with %s findings",
        elapsed,
        f"{len(errors):,}",
    )
    return errors


def validate_feed_dir(feed_dir: Path | str) -> list[ValidationError]:
    """Load a feed directory and validate it, file findings first."""
    tables, errors = load_feed(feed_dir)
    return errors + validate_feed(tables)


__all__ = [
    "REFERENCES",
    "UNIQUE_ID_TABLES",
    "load_feed",
    "read_table",
    "validate_feed",
    "validate_feed_dir",
]
