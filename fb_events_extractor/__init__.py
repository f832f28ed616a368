"""
Facebook Events Extractor

A Python library for finding public events hosted by venues around a
location, using the Graph API.

Quick start (library usage):
    from fb_events_extractor import EventSearch

    search = EventSearch(lat=40.710803, lng=-73.964040, distance=1000,
                         access_token="...")
    result = search.search_sync()
    for event in result:
        print(event.name, event.venue.name, event.start_time)

Async usage:
    result = await EventSearch(lat=..., lng=...).search()

Errors carry a code: 1 (missing coordinates), 2 (missing access token),
-1 (the search itself failed).
"""

from .extractor import EventSearch, SearchResult, search
from .exceptions import (
    EventSearchError,
    MissingCoordinatesError,
    MissingAccessTokenError,
    SearchError,
)
from .config import EVENTS_RESPONSE_SCHEMA

__version__ = "1.0.0"
__all__ = [
    "EventSearch",
    "SearchResult",
    "search",
    "EventSearchError",
    "MissingCoordinatesError",
    "MissingAccessTokenError",
    "SearchError",
    "EVENTS_RESPONSE_SCHEMA",
]
