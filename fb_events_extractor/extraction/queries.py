"""
Request Building

Builds Graph API query descriptors for the place search and the batched
id lookups. Descriptors are plain data; extraction.fetcher executes them.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import quote, urlencode

from ..config import (
    EVENT_FIELDS,
    GRAPH_API_BASE,
    PLACE_SEARCH_LIMIT,
    VENUE_FIELDS,
)

# Characters left unescaped in query strings (field expressions, id lists)
_SAFE_CHARS = ",()."

_TOKEN_RE = re.compile(r"(access_token=)[^&\s'\"]+")


@dataclass(frozen=True)
class GraphQuery:
    """A GET request against the Graph API"""
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    ids: tuple = ()

    @property
    def url(self) -> str:
        return f"{GRAPH_API_BASE}/{self.path}?{urlencode(self.params, quote_via=quote, safe=_SAFE_CHARS)}"

    @property
    def redacted_url(self) -> str:
        """URL with the access token masked, for logs and error messages."""
        return redact_token(self.url)


def redact_token(text: str) -> str:
    return _TOKEN_RE.sub(r"\1***", text)


def build_events_fields(since: int) -> str:
    """Field expression for venues plus their events starting at/after `since`."""
    return f"{VENUE_FIELDS},events.fields({EVENT_FIELDS}).since({since})"


def build_place_search_query(
    lat: float,
    lng: float,
    distance: int,
    access_token: str,
    version: str,
    query: str = "",
) -> GraphQuery:
    """
    Build the geofenced place search request.

    Args:
        lat: Center latitude
        lng: Center longitude
        distance: Search radius (unit defined by the Graph API)
        access_token: Graph API token
        version: Graph API version, e.g. "v2.8"
        query: Free-text filter; percent-encoded once when rendered

    Returns:
        GraphQuery for /<version>/search
    """
    return GraphQuery(
        path=f"{version}/search",
        params={
            "type": "place",
            "q": query or "",
            "center": f"{lat},{lng}",
            "distance": str(distance),
            "limit": str(PLACE_SEARCH_LIMIT),
            "fields": "id",
            "access_token": access_token,
        },
    )


def build_events_query(
    ids: List[str],
    access_token: str,
    version: str,
    since: int,
) -> GraphQuery:
    """
    Build the batched venue + events lookup for one id batch.

    Args:
        ids: Place ids (at most ID_BATCH_LIMIT)
        access_token: Graph API token
        version: Graph API version
        since: Unix timestamp; only events starting at/after it are returned

    Returns:
        GraphQuery for /<version>/?ids=...
    """
    return GraphQuery(
        path=f"{version}/",
        params={
            "ids": ",".join(ids),
            "fields": build_events_fields(since),
            "access_token": access_token,
        },
        ids=tuple(ids),
    )


def build_events_queries(
    batches: List[List[str]],
    access_token: str,
    version: str,
    since: int,
) -> List[GraphQuery]:
    """Build one lookup query per batch, in batch order."""
    return [build_events_query(batch, access_token, version, since) for batch in batches]
