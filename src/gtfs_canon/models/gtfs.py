"""Pydantic record models for the feed tables.

Every model derives from Entity, which gives findings what they need to
reference a record: its category, natural id, optional position within a
parent sequence and the line it was read from.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from gtfs_canon.codebook.entities import EntityType


class Entity(BaseModel):
    """Base record read from one row of a feed table."""

    # polars infers numeric dtypes for id columns like "1001"
    model_config = ConfigDict(str_strip_whitespace=True, coerce_numbers_to_str=True)

    entity_type: ClassVar[EntityType] = EntityType.UNKNOWN
    id_field: ClassVar[str | None] = None
    sequence_field: ClassVar[str | None] = None

    source_line: int = Field(default=0, ge=0, exclude=True)

    def get_id(self) -> str | None:
        """Natural identifier of this record, or None if it has none."""
        if self.id_field is None:
            return None
        value = getattr(self, self.id_field)
        return None if value is None else str(value)

    def get_sequence_number(self) -> int | None:
        """Position within the parent sequence, or None if not applicable."""
        if self.sequence_field is None:
            return None
        return getattr(self, self.sequence_field)


# Records ----------------------------------------------------------------------


class Agency(Entity):
    """agency.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.AGENCY
    id_field: ClassVar[str | None] = "agency_id"

    agency_id: str | None = None
    agency_name: str
    agency_url: str
    agency_timezone: str
    agency_lang: str | None = None


class Calendar(Entity):
    """calendar.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.CALENDAR
    id_field: ClassVar[str | None] = "service_id"

    service_id: str
    monday: int = Field(ge=0, le=1)
    tuesday: int = Field(ge=0, le=1)
    wednesday: int = Field(ge=0, le=1)
    thursday: int = Field(ge=0, le=1)
    friday: int = Field(ge=0, le=1)
    saturday: int = Field(ge=0, le=1)
    sunday: int = Field(ge=0, le=1)
    start_date: str
    end_date: str


class CalendarDate(Entity):
    """calendar_dates.txt record: a service added or removed on one date."""

    entity_type: ClassVar[EntityType] = EntityType.CALENDAR_DATE
    id_field: ClassVar[str | None] = "service_id"

    service_id: str
    date: str
    exception_type: int = Field(ge=1, le=2)


class Route(Entity):
    """routes.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.ROUTE
    id_field: ClassVar[str | None] = "route_id"

    route_id: str
    agency_id: str | None = None
    route_short_name: str | None = None
    route_long_name: str | None = None
    route_desc: str | None = None
    route_type: int = Field(ge=0)


class Stop(Entity):
    """stops.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.STOP
    id_field: ClassVar[str | None] = "stop_id"

    stop_id: str
    stop_name: str | None = None
    stop_lat: float | None = Field(default=None, ge=-90.0, le=90.0)
    stop_lon: float | None = Field(default=None, ge=-180.0, le=180.0)
    parent_station: str | None = None


class Trip(Entity):
    """trips.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.TRIP
    id_field: ClassVar[str | None] = "trip_id"

    trip_id: str
    route_id: str
    service_id: str
    shape_id: str | None = None
    direction_id: int | None = Field(default=None, ge=0, le=1)


class StopTime(Entity):
    """stop_times.txt record, identified by its trip and ordered by stop_sequence."""

    entity_type: ClassVar[EntityType] = EntityType.STOP_TIME
    id_field: ClassVar[str | None] = "trip_id"
    sequence_field: ClassVar[str | None] = "stop_sequence"

    trip_id: str
    stop_id: str
    stop_sequence: int = Field(ge=0)
    arrival_time: str | None = None
    departure_time: str | None = None
    shape_dist_traveled: float | None = Field(default=None, ge=0)


class ShapePoint(Entity):
    """shapes.txt record, one point of a shape ordered by shape_pt_sequence."""

    entity_type: ClassVar[EntityType] = EntityType.SHAPE
    id_field: ClassVar[str | None] = "shape_id"
    sequence_field: ClassVar[str | None] = "shape_pt_sequence"

    shape_id: str
    shape_pt_lat: float = Field(ge=-90.0, le=90.0)
    shape_pt_lon: float = Field(ge=-180.0, le=180.0)
    shape_pt_sequence: int = Field(ge=0)
    shape_dist_traveled: float | None = Field(default=None, ge=0)


class Frequency(Entity):
    """frequencies.txt record."""

    entity_type: ClassVar[EntityType] = EntityType.FREQUENCY
    id_field: ClassVar[str | None] = "trip_id"

    trip_id: str
    start_time: str
    end_time: str
    headway_secs: int = Field(gt=0)


# Model mapping for parsing tables by record category
MODELS: dict[EntityType, type[Entity]] = {
    model.entity_type: model
    for model in (
        Agency,
        Calendar,
        CalendarDate,
        Route,
        Stop,
        Trip,
        StopTime,
        ShapePoint,
        Frequency,
    )
}


__all__ = [
    "MODELS",
    "Agency",
    "Calendar",
    "CalendarDate",
    "Entity",
    "Frequency",
    "Route",
    "ShapePoint",
    "Stop",
    "StopTime",
    "Trip",
]
