"""Row parsing: turn table rows into records, reporting rows that fail.

Rows that cannot become records are referenced by table and line number
only, since there is no record to point at.
"""

import logging
from typing import Any

import polars as pl
from pydantic import ValidationError as PydanticValidationError

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType
from gtfs_canon.core.errors import (
    KEY_VALUE_SEPARATOR,
    PAIR_SEPARATOR,
    ValidationError,
)
from gtfs_canon.models.gtfs import MODELS, Entity

logger = logging.getLogger(__name__)

# Line 1 of every feed file is the header
FIRST_DATA_LINE = 2

# Physical line of each row, attached when the table is read from a file
SOURCE_LINE_COLUMN = "source_line"

# Pydantic error types mapped to finding kinds
PYDANTIC_ERROR_TYPES: dict[str, ErrorType] = {
    "missing": ErrorType.MISSING_FIELD,
    "int_parsing": ErrorType.NUMBER_PARSING,
    "int_from_float": ErrorType.NUMBER_PARSING,
    "float_parsing": ErrorType.NUMBER_PARSING,
    "greater_than": ErrorType.NUMBER_TOO_SMALL,
    "greater_than_equal": ErrorType.NUMBER_TOO_SMALL,
    "less_than": ErrorType.NUMBER_TOO_LARGE,
    "less_than_equal": ErrorType.NUMBER_TOO_LARGE,
    "bool_parsing": ErrorType.BOOLEAN_FORMAT,
}


def clean_bad_value(value: Any) -> str:  # noqa: ANN401
    """Render a raw cell so it is safe inside a bad-values string."""
    text = "" if value is None else str(value)
    return text.replace(PAIR_SEPARATOR, " ").replace(KEY_VALUE_SEPARATOR, " ")


def errors_from_pydantic(
    entity_type: EntityType,
    line_number: int,
    exc: PydanticValidationError,
) -> list[ValidationError]:
    """Convert a row's pydantic failure into findings at the row's line.

    Args:
        entity_type: Category of the record the row should have become
        line_number: Line of the row in its source file
        exc: The pydantic validation error

    Returns:
        One finding per failing field
    """
    errors = []
    for err in exc.errors():
        field_name = ".".join(str(part) for part in err.get("loc", ()))
        error_type = PYDANTIC_ERROR_TYPES.get(err["type"], ErrorType.OTHER)
        if error_type is ErrorType.NUMBER_TOO_SMALL and err.get("ctx", {}).get("ge") == 0:
            error_type = ErrorType.NUMBER_NEGATIVE
        if error_type is ErrorType.MISSING_FIELD:
            bad_values = {"field": field_name}
        else:
            bad_values = {"field": field_name, "value": clean_bad_value(err.get("input"))}
        errors.append(
            ValidationError.from_line(error_type, bad_values, entity_type, line_number)
        )
    return errors


def parse_entities(
    entity_type: EntityType,
    df: pl.DataFrame,
) -> tuple[list[Entity], list[ValidationError]]:
    """Build records from every row of a table.

    Null cells are dropped before validation so a blank required field is
    reported as missing rather than as a type mismatch. Line numbers come
    from the ``source_line`` column when the table has one, otherwise from
    the row position.

    Args:
        entity_type: Category of the records in the table
        df: The table, rows in file order

    Returns:
        Tuple of (parsed records, findings for rows that failed)
    """
    model = MODELS[entity_type]
    entities: list[Entity] = []
    errors: list[ValidationError] = []

    for row_idx, row in enumerate(df.to_dicts()):
        line_number = row.pop(SOURCE_LINE_COLUMN, None) or row_idx + FIRST_DATA_LINE
        filtered_row = {k: v for k, v in row.items() if v is not None}
        try:
            entity = model.model_validate({**filtered_row, "source_line": line_number})
        except PydanticValidationError as e:
            errors.extend(errors_from_pydantic(entity_type, line_number, e))
            continue
        entities.append(entity)

    if errors:
        logger.info(
            "Table '%s': %s of %s rows failed to parse (%s findings)",
            entity_type.table_name,
            len(df) - len(entities),
            len(df),
            len(errors),
        )
    return entities, errors


__all__ = [
    "FIRST_DATA_LINE",
    "SOURCE_LINE_COLUMN",
    "clean_bad_value",
    "errors_from_pydantic",
    "parse_entities",
]
