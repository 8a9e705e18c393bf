"""Record categories of a GTFS feed, labeled with their source table."""

from gtfs_canon.core.labeled_enum import LabeledEnum


class EntityType(LabeledEnum):
    """Kinds of record an error can concern."""

    UNKNOWN = (0, "unknown")
    AGENCY = (1, "agency")
    CALENDAR = (2, "calendar")
    CALENDAR_DATE = (3, "calendar_dates")
    FARE_ATTRIBUTE = (4, "fare_attributes")
    FEED_INFO = (5, "feed_info")
    FREQUENCY = (6, "frequencies")
    ROUTE = (7, "routes")
    SHAPE = (8, "shapes")
    STOP = (9, "stops")
    STOP_TIME = (10, "stop_times")
    TRANSFER = (11, "transfers")
    TRIP = (12, "trips")

    @property
    def table_name(self) -> str:
        """Name of the feed file (without ``.txt``) holding this record type."""
        return self.label
