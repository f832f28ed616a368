"""
Parsers module for Graph API responses.

- payload.py: Typed venue/event/admin payloads and response parsing
"""

from .payload import (
    AdminRef,
    EventPayload,
    VenuePayload,
    load_json,
    parse_venues_response,
    parse_place_search_response,
)
