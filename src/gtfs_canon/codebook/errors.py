"""Closed classification of validation findings.

Error kinds are enum members carrying fixed metadata instead of a class
hierarchy, so a stored row is turned back into a finding with a plain
name lookup (``ErrorType["REFERENTIAL_INTEGRITY"]``).
"""

from gtfs_canon.codebook.entities import EntityType
from gtfs_canon.core.labeled_enum import LabeledEnum, RankedEnum


class Severity(RankedEnum):
    """How serious a finding is, ordered from least to most severe."""

    INFO = (1, "Info")
    WARNING = (2, "Warning")
    ERROR = (3, "Error")
    FATAL = (4, "Fatal")


class ErrorType(LabeledEnum):
    """Every recognized kind of validation finding.

    Each member is defined as ``(severity, entity_type)``. The entity type is
    the category of record the finding normally concerns; it documents the
    kind and supports filtering but is not enforced when errors are built.
    Values are assigned in definition order so members sharing the same
    metadata stay distinct.
    """

    # Feed and table structure
    TABLE_MISSING = (Severity.FATAL, EntityType.UNKNOWN)
    TABLE_IN_SUBDIRECTORY = (Severity.FATAL, EntityType.UNKNOWN)
    TABLE_MISSING_COLUMN_HEADERS = (Severity.FATAL, EntityType.UNKNOWN)
    TABLE_TOO_LONG = (Severity.ERROR, EntityType.UNKNOWN)
    DUPLICATE_HEADER = (Severity.ERROR, EntityType.UNKNOWN)
    COLUMN_NAME_UNSAFE = (Severity.WARNING, EntityType.UNKNOWN)
    MISSING_COLUMN = (Severity.ERROR, EntityType.UNKNOWN)
    WRONG_NUMBER_OF_FIELDS = (Severity.ERROR, EntityType.UNKNOWN)

    # Field parsing
    MISSING_FIELD = (Severity.ERROR, EntityType.UNKNOWN)
    BOOLEAN_FORMAT = (Severity.ERROR, EntityType.UNKNOWN)
    DATE_FORMAT = (Severity.ERROR, EntityType.UNKNOWN)
    TIME_FORMAT = (Severity.ERROR, EntityType.UNKNOWN)
    TIME_ZONE_FORMAT = (Severity.ERROR, EntityType.UNKNOWN)
    URL_FORMAT = (Severity.WARNING, EntityType.UNKNOWN)
    LANGUAGE_FORMAT = (Severity.WARNING, EntityType.UNKNOWN)
    NUMBER_PARSING = (Severity.ERROR, EntityType.UNKNOWN)
    NUMBER_NEGATIVE = (Severity.ERROR, EntityType.UNKNOWN)
    NUMBER_TOO_SMALL = (Severity.WARNING, EntityType.UNKNOWN)
    NUMBER_TOO_LARGE = (Severity.WARNING, EntityType.UNKNOWN)

    # Identity and references
    DUPLICATE_ID = (Severity.ERROR, EntityType.UNKNOWN)
    REFERENTIAL_INTEGRITY = (Severity.ERROR, EntityType.UNKNOWN)

    # Record-level semantics
    ROUTE_SHORT_AND_LONG_NAME_MISSING = (Severity.ERROR, EntityType.ROUTE)
    ROUTE_SHORT_NAME_TOO_LONG = (Severity.INFO, EntityType.ROUTE)
    ROUTE_LONG_NAME_CONTAINS_SHORT_NAME = (Severity.INFO, EntityType.ROUTE)
    ROUTE_DESCRIPTION_SAME_AS_NAME = (Severity.INFO, EntityType.ROUTE)
    STOP_NAME_MISSING = (Severity.WARNING, EntityType.STOP)
    STOP_UNUSED = (Severity.INFO, EntityType.STOP)
    DUPLICATE_STOP = (Severity.WARNING, EntityType.STOP)
    TRIP_TOO_FEW_STOP_TIMES = (Severity.ERROR, EntityType.TRIP)
    DUPLICATE_TRIP = (Severity.WARNING, EntityType.TRIP)
    MISSING_SHAPE = (Severity.INFO, EntityType.TRIP)
    MISSING_ARRIVAL_OR_DEPARTURE = (Severity.ERROR, EntityType.STOP_TIME)
    DEPARTURE_BEFORE_ARRIVAL = (Severity.ERROR, EntityType.STOP_TIME)
    TRAVEL_TIME_NEGATIVE = (Severity.ERROR, EntityType.STOP_TIME)
    TRAVEL_TIME_ZERO = (Severity.WARNING, EntityType.STOP_TIME)
    TRAVEL_DISTANCE_ZERO = (Severity.WARNING, EntityType.STOP_TIME)
    SHAPE_DIST_TRAVELED_NOT_INCREASING = (Severity.WARNING, EntityType.SHAPE)
    FREQUENCY_PERIOD_OVERLAP = (Severity.ERROR, EntityType.FREQUENCY)
    SERVICE_NEVER_ACTIVE = (Severity.WARNING, EntityType.CALENDAR)
    SERVICE_UNUSED = (Severity.INFO, EntityType.CALENDAR)
    DATE_NO_SERVICE = (Severity.WARNING, EntityType.CALENDAR_DATE)
    CURRENCY_UNKNOWN = (Severity.ERROR, EntityType.FARE_ATTRIBUTE)

    OTHER = (Severity.INFO, EntityType.UNKNOWN)

    def __new__(cls, severity: Severity, entity_type: EntityType) -> "ErrorType":
        """Create a member with the next sequential value."""
        obj = object.__new__(cls)
        obj._value_ = len(cls.__members__) + 1
        obj._severity_ = severity
        obj._entity_type_ = entity_type
        return obj

    @property
    def label(self) -> str:
        """Member name in lower case, e.g. ``"referential_integrity"``."""
        return self.name.lower()

    @property
    def severity(self) -> Severity:
        """Fixed severity of this kind of finding."""
        return self._severity_

    @property
    def entity_type(self) -> EntityType:
        """Category of record this kind of finding normally concerns."""
        return self._entity_type_

    @classmethod
    def at_least(cls, severity: Severity) -> list["ErrorType"]:
        """All kinds whose severity is at or above ``severity``."""
        return [member for member in cls if member.severity >= severity]


__all__ = ["ErrorType", "Severity"]
