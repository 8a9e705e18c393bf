"""Validation findings as immutable, flat-storable values.

A finding is one ErrorType, a flat ``key=value;key=value`` string of the
offending values, and the ordered references to the records it concerns.
Findings are data handed to storage, never raised.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.codebook.errors import ErrorType, Severity
from gtfs_canon.models.gtfs import Entity

PAIR_SEPARATOR = ";"
KEY_VALUE_SEPARATOR = "="


# Bad values codec -------------------------------------------------------------


def encode_bad_values(values: Mapping[str, Any]) -> str:
    """Encode key-value pairs as ``k1=v1;k2=v2`` in mapping order.

    Args:
        values: Ordered mapping of names to offending values. None renders
            as an empty value.

    Returns:
        The flat bad-values string

    Raises:
        ValueError: If a key or value contains a separator character
    """
    pairs = []
    for key, value in values.items():
        text = "" if value is None else str(value)
        for part in (str(key), text):
            if PAIR_SEPARATOR in part or KEY_VALUE_SEPARATOR in part:
                msg = (
                    f"Bad value {part!r} contains '{PAIR_SEPARATOR}' or "
                    f"'{KEY_VALUE_SEPARATOR}' and cannot be encoded"
                )
                raise ValueError(msg)
        pairs.append(f"{key}{KEY_VALUE_SEPARATOR}{text}")
    return PAIR_SEPARATOR.join(pairs)


def decode_bad_values(text: str) -> dict[str, str]:
    """Decode a bad-values string into an ordered dict.

    A segment without ``=`` maps to an empty value; empty segments are
    skipped.
    """
    decoded: dict[str, str] = {}
    if not text:
        return decoded
    for segment in text.split(PAIR_SEPARATOR):
        if not segment:
            continue
        key, _, value = segment.partition(KEY_VALUE_SEPARATOR)
        decoded[key] = value
    return decoded


# Values -----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EntityReference:
    """One record a finding concerns.

    Built either from a live record or, when the row never became a record,
    from its type and line number alone.

    Attributes:
        entity_type: Category of the referenced record (always set)
        id: Natural identifier; None when built from type and line
        sequence_number: Position within the parent sequence, if any
        line_number: Line in the source file (header is line 1); expected to
            fit a signed 32-bit integer
    """

    entity_type: EntityType
    id: str | None = None
    sequence_number: int | None = None
    line_number: int | None = None

    def __post_init__(self) -> None:
        """Reject references without a record category."""
        if not isinstance(self.entity_type, EntityType):
            msg = f"entity_type must be an EntityType, got {self.entity_type!r}"
            raise ValueError(msg)

    @classmethod
    def from_entity(cls, entity: Entity) -> "EntityReference":
        """Snapshot a live record's category, id, sequence number and line."""
        return cls(
            entity_type=entity.entity_type,
            id=entity.get_id(),
            sequence_number=entity.get_sequence_number(),
            line_number=int(entity.source_line),
        )

    @classmethod
    def from_line(
        cls,
        entity_type: EntityType,
        line_number: int | None,
    ) -> "EntityReference":
        """Reference a row that could not be parsed into a record."""
        return cls(entity_type=entity_type, line_number=line_number)


@dataclass(frozen=True, slots=True)
class ValidationError:
    """One validation finding.

    Use the ``from_entities``, ``from_line`` and ``without_entities``
    constructors from validation passes; the plain constructor is the path
    storage uses to rebuild findings from rows.

    Attributes:
        type: Classification of the finding
        bad_values: Offending values encoded as ``key=value;key=value``
        referenced_entities: Records concerned, primary record first
    """

    type: ErrorType
    bad_values: str
    referenced_entities: tuple[EntityReference, ...] = ()

    def __post_init__(self) -> None:
        """Fail fast on a missing classification and freeze the references."""
        if not isinstance(self.type, ErrorType):
            msg = f"Validation error type must be an ErrorType, got {self.type!r}"
            raise ValueError(msg)
        if isinstance(self.bad_values, Mapping):
            object.__setattr__(self, "bad_values", encode_bad_values(self.bad_values))
        elif not isinstance(self.bad_values, str):
            msg = f"bad_values must be a str or mapping, got {self.bad_values!r}"
            raise ValueError(msg)

        if self.referenced_entities is None:
            object.__setattr__(self, "referenced_entities", ())
        elif not isinstance(self.referenced_entities, tuple):
            object.__setattr__(self, "referenced_entities", tuple(self.referenced_entities))
        for ref in self.referenced_entities:
            if not isinstance(ref, EntityReference):
                msg = f"referenced_entities must hold EntityReference values, got {ref!r}"
                raise ValueError(msg)

    @classmethod
    def from_entities(
        cls,
        error_type: ErrorType,
        bad_values: str | Mapping[str, Any],
        *entities: Entity,
    ) -> "ValidationError":
        """Build a finding referencing each record, in the order given."""
        references = tuple(EntityReference.from_entity(entity) for entity in entities)
        return cls(error_type, bad_values, references)

    @classmethod
    def from_line(
        cls,
        error_type: ErrorType,
        bad_values: str | Mapping[str, Any],
        entity_type: EntityType,
        line_number: int | None,
    ) -> "ValidationError":
        """Build a finding for a row that never became a record."""
        return cls(error_type, bad_values, (EntityReference.from_line(entity_type, line_number),))

    @classmethod
    def without_entities(
        cls,
        error_type: ErrorType,
        bad_values: str | Mapping[str, Any],
    ) -> "ValidationError":
        """Build a file- or feed-level finding that concerns no single row."""
        return cls(error_type, bad_values, ())

    @property
    def severity(self) -> Severity:
        """Severity fixed by the finding's type."""
        return self.type.severity

    @property
    def bad_value_pairs(self) -> dict[str, str]:
        """Bad values decoded into an ordered dict."""
        return decode_bad_values(self.bad_values)

    @property
    def primary_entity(self) -> EntityReference | None:
        """First referenced record, or None for file-level findings."""
        return self.referenced_entities[0] if self.referenced_entities else None


__all__ = [
    "EntityReference",
    "ValidationError",
    "decode_bad_values",
    "encode_bad_values",
]
