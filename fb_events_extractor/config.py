"""
Default configuration for the Facebook Events Extractor.

Module-level constants shared by the extraction modules. Per-search
options (coordinates, token, sort...) live in config_manager.SearchConfig.
The access token can be supplied through the FEBL_ACCESS_TOKEN
environment variable instead of the accessToken option.
"""

import os

# Graph API
GRAPH_API_BASE = "https://graph.facebook.com"
DEFAULT_API_VERSION = "v2.8"

# Access token environment variable
ACCESS_TOKEN_ENV = "FEBL_ACCESS_TOKEN"


def get_access_token():
    """Get the access token from the environment. Empty values count as unset."""
    token = os.environ.get(ACCESS_TOKEN_ENV)
    if token:
        return token
    return None


# API Server
API_HOST = "0.0.0.0"
API_PORT = 8000

# Search Parameters
DEFAULT_DISTANCE = 100
PLACE_SEARCH_LIMIT = 1000
ID_BATCH_LIMIT = 50  # Graph API accepts at most 50 ids per /?ids= call
ALLOWED_SORTS = ("time", "distance", "venue", "popularity")

# Recursion
DEFAULT_MAX_EXTRA_ROUNDS = 1

# HTTP transport (seconds, None disables)
DEFAULT_REQUEST_TIMEOUT = 60.0

# Field expressions for the batched id lookup
VENUE_FIELDS = (
    "id,name,about,emails,link,username,category_list,"
    "cover.fields(id,source),"
    "picture.type(large),"
    "location"
)

EVENT_FIELDS = (
    "id,type,name,"
    "cover.fields(id,source),"
    "picture.type(large),"
    "description,start_time,end_time,"
    "attending_count,declined_count,maybe_count,noreply_count,"
    "admins.fields(name,id,profile_type)"
)

# Earth radius used for distance sorting
EARTH_RADIUS_METERS = 6371000

# Response Schema
_NULLABLE_STRING = {"type": ["string", "null"]}

EVENTS_RESPONSE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "title": "Events response",
    "type": "object",
    "required": ["events", "metadata"],
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["id", "name", "stats", "venue"],
                "properties": {
                    "id": {"type": "string"},
                    "name": {"type": "string"},
                    "type": _NULLABLE_STRING,
                    "coverPicture": _NULLABLE_STRING,
                    "profilePicture": _NULLABLE_STRING,
                    "description": _NULLABLE_STRING,
                    "startTime": _NULLABLE_STRING,
                    "endTime": _NULLABLE_STRING,
                    "stats": {
                        "type": "object",
                        "properties": {
                            "attending": {"type": ["integer", "null"]},
                            "declined": {"type": ["integer", "null"]},
                            "maybe": {"type": ["integer", "null"]},
                            "noreply": {"type": ["integer", "null"]},
                        },
                    },
                    "venue": {
                        "type": "object",
                        "required": ["id", "name"],
                        "properties": {
                            "id": {"type": "string"},
                            "name": {"type": "string"},
                            "about": _NULLABLE_STRING,
                            "emails": {"type": ["array", "null"], "items": {"type": "string"}},
                            "coverPicture": _NULLABLE_STRING,
                            "profilePicture": _NULLABLE_STRING,
                            "categories": {"type": ["array", "null"]},
                            "link": _NULLABLE_STRING,
                            "username": _NULLABLE_STRING,
                            "location": {"type": ["object", "null"]},
                        },
                    },
                },
            },
        },
        "metadata": {
            "type": "object",
            "required": ["venues", "venuesWithEvents", "events"],
            "properties": {
                "venues": {"type": "integer"},
                "venuesWithEvents": {"type": "integer"},
                "events": {"type": "integer"},
            },
        },
    },
}
