"""
Result Sorting

Orders the final event list for the `sort` option. Events missing the
sort key go last; ties keep aggregation order.
"""

import math
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..config import EARTH_RADIUS_METERS
from ..models import Event


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)
    a = (math.sin(dlat / 2) ** 2
         + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
         * math.sin(dlng / 2) ** 2)
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def venue_coordinates(event: Event) -> Optional[tuple]:
    location = event.venue.location or {}
    lat = location.get("latitude")
    lng = location.get("longitude")
    if not isinstance(lat, (int, float)) or not isinstance(lng, (int, float)):
        return None
    return float(lat), float(lng)


def parse_start_time(value: Optional[str]) -> Optional[datetime]:
    """Parse a Graph API time ("2017-03-01T20:00:00+0100"). Naive values are taken as UTC."""
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, "%Y-%m-%dT%H:%M:%S%z")
    except ValueError:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _popularity(event: Event) -> int:
    return (event.stats.attending or 0) + (event.stats.maybe or 0)


def _sort_missing_last(events: List[Event], key: Callable) -> List[Event]:
    present = []
    missing = []
    for event in events:
        value = key(event)
        if value is None:
            missing.append(event)
        else:
            present.append((value, event))
    present.sort(key=lambda pair: pair[0])
    return [event for _, event in present] + missing


def sort_events(
    events: List[Event],
    sort: Optional[str],
    center_lat: float = None,
    center_lng: float = None,
) -> List[Event]:
    """
    Return a sorted copy of `events`.

    Args:
        events: Aggregated events
        sort: time, distance, venue or popularity. None keeps the order.
        center_lat: Search center latitude (distance sort)
        center_lng: Search center longitude (distance sort)
    """
    if sort == "time":
        return _sort_missing_last(events, lambda e: parse_start_time(e.start_time))

    if sort == "distance":
        def distance(event):
            coords = venue_coordinates(event)
            if coords is None or center_lat is None or center_lng is None:
                return None
            return haversine_meters(center_lat, center_lng, coords[0], coords[1])
        return _sort_missing_last(events, distance)

    if sort == "venue":
        return _sort_missing_last(events, lambda e: (e.venue.name or "").lower() or None)

    if sort == "popularity":
        return sorted(events, key=_popularity, reverse=True)

    return list(events)
