"""
EventSearch - High-level API for venue event discovery.

Validates the options, runs the search pipeline and returns a
SearchResult. Any failure during the search raises a single SearchError
(code -1); no partial results are returned.

Usage:
    from fb_events_extractor import EventSearch

    search = EventSearch(lat=40.710803, lng=-73.964040, distance=500)
    result = search.search_sync()
    for event in result:
        print(event.name, event.venue.name)

Or from async code:
    result = await EventSearch(lat=..., lng=..., access_token="...").search()
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional

from .config import (
    DEFAULT_API_VERSION,
    DEFAULT_DISTANCE,
    DEFAULT_MAX_EXTRA_ROUNDS,
    DEFAULT_REQUEST_TIMEOUT,
    EVENTS_RESPONSE_SCHEMA,
)
from .config_manager import SearchConfig
from .exceptions import SearchError
from .extraction import GraphFetcher, SearchPipeline, SessionState, sort_events
from .models import Event


class SearchResult:
    """Result object returned by search().

    Attributes:
        events: List of Event records.
        metadata: Dictionary with venues, venuesWithEvents and events counts.
    """

    def __init__(self, events: List[Event], metadata: Dict[str, int]):
        self.events = events
        self.metadata = metadata

    def __len__(self):
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def __getitem__(self, index):
        return self.events[index]

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as plain data matching EVENTS_RESPONSE_SCHEMA."""
        return {
            "events": [event.to_dict() for event in self.events],
            "metadata": dict(self.metadata),
        }

    def __repr__(self):
        return (
            f"<SearchResult: {len(self.events)} events from "
            f"{self.metadata.get('venuesWithEvents', 0)} venues>"
        )


class EventSearch:
    """Search public events hosted by venues around a location.

    Args:
        lat: Latitude of the search center (required).
        lng: Longitude of the search center (required).
        distance: Search radius (default: 100).
        access_token: Graph API token. Falls back to FEBL_ACCESS_TOKEN.
        query: Optional free-text filter for the place search.
        sort: time, distance, venue or popularity. Other values are ignored.
        version: Graph API version (default: "v2.8").
        max_extra_rounds: Admin-discovery rounds after the first one (default: 1).
        request_timeout: Per-request HTTP timeout in seconds.
        verbose: Whether to print progress output (default: False).
        fetcher: Optional fetcher replacing GraphFetcher (must provide
                 async fetch/fetch_all). The caller manages its lifecycle.

    Example:
        result = EventSearch(lat=52.52, lng=13.40, access_token="...").search_sync()
        print(result.metadata)
    """

    def __init__(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        distance: int = DEFAULT_DISTANCE,
        access_token: Optional[str] = None,
        query: Optional[str] = None,
        sort: Optional[str] = None,
        version: str = DEFAULT_API_VERSION,
        max_extra_rounds: int = DEFAULT_MAX_EXTRA_ROUNDS,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
        verbose: bool = False,
        fetcher=None,
    ):
        self._config = SearchConfig(
            lat=lat,
            lng=lng,
            distance=distance,
            access_token=access_token,
            query=query,
            sort=sort,
            version=version,
            max_extra_rounds=max_extra_rounds,
            request_timeout=request_timeout,
            verbose=verbose,
        )
        self._fetcher = fetcher
        self.last_pipeline: Optional[SearchPipeline] = None

    @classmethod
    def from_options(cls, options: Dict[str, Any], **kwargs) -> "EventSearch":
        """Build from a camelCase options mapping (lat, lng, accessToken, ...)."""
        return cls(
            lat=options.get("lat"),
            lng=options.get("lng"),
            distance=options.get("distance") or DEFAULT_DISTANCE,
            access_token=options.get("accessToken"),
            query=options.get("query"),
            sort=options.get("sort"),
            version=options.get("version") or DEFAULT_API_VERSION,
            max_extra_rounds=options.get("maxExtraRounds", DEFAULT_MAX_EXTRA_ROUNDS),
            **kwargs,
        )

    @property
    def config(self) -> SearchConfig:
        return self._config

    def get_schema(self) -> Dict[str, Any]:
        """Return the JSON schema describing SearchResult.to_dict()."""
        return copy.deepcopy(EVENTS_RESPONSE_SCHEMA)

    async def search(self) -> SearchResult:
        """Run the search.

        Raises:
            MissingCoordinatesError: lat or lng missing (code 1).
            MissingAccessTokenError: no token resolvable (code 2).
            SearchError: anything failing once the search started (code -1).
        """
        self._config.validate()

        try:
            if self._fetcher is not None:
                state = await self._run(self._fetcher)
            else:
                async with GraphFetcher(timeout=self._config.request_timeout) as fetcher:
                    state = await self._run(fetcher)
        except SearchError:
            raise
        except Exception as e:
            raise SearchError(e) from e

        events = sort_events(state.events, self._config.sort, self._config.lat, self._config.lng)
        if self._config.verbose:
            print(
                f"Done! {state.events_count} events from {state.venues_with_events} "
                f"venues ({state.venues_count} places searched)"
            )
        return SearchResult(events=events, metadata=state.metadata())

    async def _run(self, fetcher) -> SessionState:
        pipeline = SearchPipeline(self._config, fetcher)
        self.last_pipeline = pipeline
        return await pipeline.run()

    def search_sync(self) -> SearchResult:
        """Run search() on a new event loop."""
        return asyncio.run(self.search())


async def search(options: Dict[str, Any], **kwargs) -> SearchResult:
    """Convenience wrapper: EventSearch.from_options(options).search()."""
    return await EventSearch.from_options(options, **kwargs).search()

