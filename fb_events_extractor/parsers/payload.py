"""
Graph API Payload Parser

Turns raw Graph API response bodies into typed payloads.

Batched id lookup (/?ids=a,b,c) returns an object keyed by place id:

    {
        "<place id>": {
            "id", "name", "about", "emails", "link", "username",
            "category_list": [{"id", "name"}],
            "cover": {"id", "source"},
            "picture": {"data": {"url"}},
            "location": {...},
            "events": {"data": [<event>, ...], "paging": {...}}
        },
        ...
    }

Each <event> carries:
    "id", "name", "type", "cover", "picture", "description",
    "start_time", "end_time", "*_count" stats,
    "admins": {"data": [{"id", "name", "profile_type"}]}

Place search (/search?type=place) returns {"data": [{"id"}, ...], "paging"}.

Required fields: venue name, event id and name, admin id. Missing required
fields raise PayloadError instead of producing half-filled records.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import GraphAPIError, PayloadError


def safe_get(obj: Any, *keys, default=None) -> Any:
    """Safely traverse nested dicts"""
    current = obj
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


@dataclass
class AdminRef:
    """An entry of an event's admin list"""
    id: str
    profile_type: Optional[str] = None
    name: Optional[str] = None

    @property
    def is_page(self) -> bool:
        return self.profile_type == "page"


@dataclass
class EventPayload:
    """A single event as returned inside a venue's events edge"""
    id: str
    name: str
    type: Optional[str] = None
    cover_source: Optional[str] = None
    picture_url: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    attending_count: Optional[int] = None
    declined_count: Optional[int] = None
    maybe_count: Optional[int] = None
    noreply_count: Optional[int] = None
    admins: List[AdminRef] = field(default_factory=list)


@dataclass
class VenuePayload:
    """A venue (page) with its upcoming events"""
    id: str
    name: str
    about: Optional[str] = None
    categories: Optional[List[Dict]] = None
    link: Optional[str] = None
    username: Optional[str] = None
    emails: Optional[List[str]] = None
    cover_source: Optional[str] = None
    picture_url: Optional[str] = None
    location: Optional[Dict] = None
    events: List[EventPayload] = field(default_factory=list)


def load_json(body: Any) -> Any:
    """Decode a response body, raising GraphAPIError for error payloads."""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Response is not valid JSON: {e}") from e

    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        raise GraphAPIError(
            error.get("message") or "Graph API returned an error",
            error_type=error.get("type"),
            api_code=error.get("code"),
        )
    return body


def _require_str(data: Dict, key: str, what: str) -> str:
    value = data.get(key)
    if value is None or value == "":
        raise PayloadError(f"{what} is missing required field '{key}'")
    return str(value)


def parse_admin(data: Any) -> AdminRef:
    if not isinstance(data, dict):
        raise PayloadError(f"Admin entry must be an object, got {type(data).__name__}")
    return AdminRef(
        id=_require_str(data, "id", "Admin entry"),
        profile_type=data.get("profile_type"),
        name=data.get("name"),
    )


def parse_event(data: Any) -> EventPayload:
    if not isinstance(data, dict):
        raise PayloadError(f"Event entry must be an object, got {type(data).__name__}")

    event_id = _require_str(data, "id", "Event")
    admins_data = safe_get(data, "admins", "data", default=[])
    if not isinstance(admins_data, list):
        raise PayloadError(f"Event {event_id} has a malformed admin list")

    return EventPayload(
        id=event_id,
        name=_require_str(data, "name", f"Event {event_id}"),
        type=data.get("type"),
        cover_source=safe_get(data, "cover", "source"),
        picture_url=safe_get(data, "picture", "data", "url"),
        description=data.get("description") or None,
        start_time=data.get("start_time") or None,
        end_time=data.get("end_time") or None,
        attending_count=data.get("attending_count"),
        declined_count=data.get("declined_count"),
        maybe_count=data.get("maybe_count"),
        noreply_count=data.get("noreply_count"),
        admins=[parse_admin(admin) for admin in admins_data],
    )


def parse_venue(venue_id: str, data: Any) -> VenuePayload:
    """Parse one venue entry of a batched lookup."""
    if not isinstance(data, dict):
        raise PayloadError(f"Venue {venue_id} must be an object, got {type(data).__name__}")

    events_data = safe_get(data, "events", "data", default=[])
    if not isinstance(events_data, list):
        raise PayloadError(f"Venue {venue_id} has a malformed events edge")

    return VenuePayload(
        id=venue_id,
        name=_require_str(data, "name", f"Venue {venue_id}"),
        about=data.get("about") or None,
        categories=data.get("category_list") or None,
        link=data.get("link") or None,
        username=data.get("username") or None,
        emails=data.get("emails") or None,
        cover_source=safe_get(data, "cover", "source"),
        picture_url=safe_get(data, "picture", "data", "url"),
        location=data.get("location") or None,
        events=[parse_event(event) for event in events_data],
    )


def parse_venues_response(body: Any) -> Dict[str, VenuePayload]:
    """
    Parse a batched id lookup response.

    Args:
        body: Raw response text (or already-decoded JSON)

    Returns:
        Dictionary of place id -> VenuePayload, in response order

    Raises:
        PayloadError: If the body is not a JSON object of venue entries
        GraphAPIError: If the body is a Graph API error payload
    """
    data = load_json(body)
    if not isinstance(data, dict):
        raise PayloadError(f"Venue lookup response must be an object, got {type(data).__name__}")
    return {venue_id: parse_venue(venue_id, venue) for venue_id, venue in data.items()}


def parse_place_search_response(body: Any) -> List[Any]:
    """
    Extract the place references from a place search response.

    A list body is taken as-is (already a list of references).
    """
    data = load_json(body)
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    raise PayloadError("Place search response has no 'data' list")
