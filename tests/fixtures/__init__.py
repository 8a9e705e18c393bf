"""Test fixtures for feed validation tests.

Modules:
    - feed_records: record builders and a small valid feed
"""

from .feed_records import (
    create_agency,
    create_feed_tables,
    create_route,
    create_stop,
    create_stop_time,
    create_trip,
)

__all__ = [
    "create_agency",
    "create_feed_tables",
    "create_route",
    "create_stop",
    "create_stop_time",
    "create_trip",
]
