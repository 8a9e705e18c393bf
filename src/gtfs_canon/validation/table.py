"""Table-level checks: required files and required column headers."""

import logging
from collections.abc import Iterable, Mapping

import polars as pl

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType
from gtfs_canon.core.errors import ValidationError
from gtfs_canon.models.gtfs import MODELS, Entity

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    EntityType.AGENCY,
    EntityType.STOP,
    EntityType.ROUTE,
    EntityType.TRIP,
    EntityType.STOP_TIME,
)


def get_required_columns(model: type[Entity]) -> list[str]:
    """Get names of fields a record model cannot be built without.

    Args:
        model: Record model class

    Returns:
        Required field names in model order
    """
    return [
        name
        for name, field_info in model.model_fields.items()
        if field_info.is_required() and name != "source_line"
    ]


def check_required_tables(
    tables: Mapping[str, pl.DataFrame | None],
    required: Iterable[EntityType] = REQUIRED_TABLES,
) -> list[ValidationError]:
    """Report every required table absent from the feed.

    Args:
        tables: Loaded tables keyed by table name (e.g. "routes")
        required: Record categories whose tables must be present

    Returns:
        One TABLE_MISSING finding per missing table
    """
    errors = []
    for entity_type in required:
        if tables.get(entity_type.table_name) is None:
            logger.debug("Required table '%s' is missing", entity_type.table_name)
            errors.append(
                ValidationError.without_entities(
                    ErrorType.TABLE_MISSING,
                    {"table": entity_type.table_name},
                )
            )
    return errors


def check_required_columns(
    entity_type: EntityType,
    df: pl.DataFrame,
    required: Iterable[str] | None = None,
) -> list[ValidationError]:
    """Report every required column missing from a table header.

    Args:
        entity_type: Category of the records in the table
        df: The table
        required: Column names to require. Defaults to the required fields
            of the table's record model.

    Returns:
        One MISSING_COLUMN finding per missing column
    """
    if required is None:
        required = get_required_columns(MODELS[entity_type])

    return [
        ValidationError.without_entities(
            ErrorType.MISSING_COLUMN,
            {"table": entity_type.table_name, "column": column},
        )
        for column in required
        if column not in df.columns
    ]


__all__ = [
    "REQUIRED_TABLES",
    "check_required_columns",
    "check_required_tables",
    "get_required_columns",
]
