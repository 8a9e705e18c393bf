"""Base classes for enumerations carrying an integer code and a label.

Codebook enums are stored by member name, so the integer code only fixes
ordering and the label names the thing in feed terms (e.g. a table name).
"""

from enum import Enum
from functools import total_ordering
from typing import Optional


class LabeledEnum(Enum):
    """Enumeration whose members are defined as ``(value, label)`` tuples.

    Example:
        class EntityType(LabeledEnum):
            ROUTE = (1, "routes")
            TRIP = (2, "trips")

        EntityType.ROUTE.value  # 1
        EntityType.ROUTE.label  # "routes"
        EntityType.from_label("trips")  # EntityType.TRIP
    """

    def __new__(cls, value: int, label: str) -> "LabeledEnum":
        """Create a new enum member with value and label."""
        obj = object.__new__(cls)
        obj._value_ = value
        obj._label_ = label
        return obj

    @property
    def label(self) -> str:
        """Get the human-readable label for this enum member."""
        return self._label_

    @classmethod
    def from_label(cls, label: str) -> Optional["LabeledEnum"]:
        """Look up an enum member by its label (case-sensitive)."""
        for member in cls:
            if member.label == label:
                return member
        return None

    @classmethod
    def from_name(cls, name: str) -> "LabeledEnum":
        """Look up an enum member by its stored name.

        Raises:
            ValueError: If no member has that name
        """
        try:
            return cls[name]
        except KeyError:
            msg = f"Unknown {cls.__name__} name: {name!r}"
            raise ValueError(msg) from None


@total_ordering
class RankedEnum(LabeledEnum):
    """Labeled enumeration totally ordered by member value."""

    def __lt__(self, other: object) -> bool:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self.value < other.value
