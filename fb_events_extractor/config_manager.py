"""
Configuration manager for library usage.

Normalises the options accepted by EventSearch into a single dataclass.
The access token falls back to the FEBL_ACCESS_TOKEN environment variable
when it is not passed explicitly.
"""

from dataclasses import dataclass
from typing import Optional

from .config import (
    ALLOWED_SORTS,
    DEFAULT_API_VERSION,
    DEFAULT_DISTANCE,
    DEFAULT_MAX_EXTRA_ROUNDS,
    DEFAULT_REQUEST_TIMEOUT,
    get_access_token,
)
from .exceptions import MissingAccessTokenError, MissingCoordinatesError


def normalize_sort(sort: Optional[str]) -> Optional[str]:
    """Lowercase a sort option, dropping values outside ALLOWED_SORTS."""
    if not sort:
        return None
    sort = sort.lower()
    return sort if sort in ALLOWED_SORTS else None


@dataclass
class SearchConfig:
    """Configuration for one EventSearch.

    Args:
        lat: Latitude of the search center (required).
        lng: Longitude of the search center (required).
        distance: Search radius passed to the place search.
        access_token: Graph API token. If None, falls back to FEBL_ACCESS_TOKEN.
        query: Optional free-text filter for the place search.
        sort: One of time, distance, venue, popularity (case-insensitive).
              Anything else is silently ignored.
        version: Graph API version.
        max_extra_rounds: How many admin-discovery rounds may follow the
                          first one.
        request_timeout: Per-request HTTP timeout in seconds (None disables).
        verbose: Whether to print progress output.
    """

    lat: Optional[float] = None
    lng: Optional[float] = None
    distance: int = DEFAULT_DISTANCE
    access_token: Optional[str] = None
    query: Optional[str] = None
    sort: Optional[str] = None
    version: str = DEFAULT_API_VERSION
    max_extra_rounds: int = DEFAULT_MAX_EXTRA_ROUNDS
    request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT
    verbose: bool = False

    def __post_init__(self):
        if not self.access_token:
            self.access_token = get_access_token()
        if self.distance is None:
            self.distance = DEFAULT_DISTANCE
        if not self.version:
            self.version = DEFAULT_API_VERSION
        self.query = self.query or ""
        self.sort = normalize_sort(self.sort)
        if self.max_extra_rounds is None:
            self.max_extra_rounds = DEFAULT_MAX_EXTRA_ROUNDS
        self.max_extra_rounds = max(0, int(self.max_extra_rounds))

    def validate(self):
        """Check required options. Raises before any network call is made."""
        if self.lat is None or self.lng is None:
            raise MissingCoordinatesError("Please specify the lat and lng parameters!")
        if not self.access_token:
            raise MissingAccessTokenError(
                "Please specify an Access Token, either as environment variable "
                "or as accessToken parameter!"
            )
