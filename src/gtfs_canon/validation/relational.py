"""Relational checks between parsed records: duplicate ids and references."""

import logging
from collections.abc import Sequence

from gtfs_canon.codebook.errors import ErrorType
from gtfs_canon.core.errors import ValidationError
from gtfs_canon.models.gtfs import Entity
from gtfs_canon.validation.row import clean_bad_value

logger = logging.getLogger(__name__)


def check_duplicate_ids(entities: Sequence[Entity]) -> list[ValidationError]:
    """Report records whose id (and sequence number) repeat an earlier record.

    Records without an id are skipped. Each finding references the
    duplicate first and the earlier record second.

    Args:
        entities: Records of one table, in file order

    Returns:
        One DUPLICATE_ID finding per repeated record
    """
    first_seen: dict[tuple[str, int | None], Entity] = {}
    errors = []

    for entity in entities:
        entity_id = entity.get_id()
        if entity_id is None:
            continue
        key = (entity_id, entity.get_sequence_number())
        original = first_seen.get(key)
        if original is None:
            first_seen[key] = entity
            continue
        errors.append(
            ValidationError.from_entities(
                ErrorType.DUPLICATE_ID,
                {"id": clean_bad_value(entity_id)},
                entity,
                original,
            )
        )

    return errors


def check_references(
    children: Sequence[Entity],
    parents: Sequence[Entity],
    field: str,
    error_type: ErrorType = ErrorType.REFERENTIAL_INTEGRITY,
) -> list[ValidationError]:
    """Report child records pointing at parent ids that do not exist.

    The missing parent has no record to reference, so each finding
    references only the child.

    Args:
        children: Records holding the foreign key
        parents: Records whose ids the key must match
        field: Name of the foreign-key field on the children
        error_type: Kind of finding to emit

    Returns:
        One finding per dangling reference, bad values ``<field>=<value>``
    """
    parent_ids = {parent.get_id() for parent in parents}
    errors = []

    for child in children:
        value = getattr(child, field)
        if value is None or value in parent_ids:
            continue
        errors.append(
            ValidationError.from_entities(error_type, {field: clean_bad_value(value)}, child)
        )

    if errors:
        logger.debug(
            "%s dangling references in field '%s'",
            len(errors),
            field,
        )
    return errors


__all__ = ["check_duplicate_ids", "check_references"]
