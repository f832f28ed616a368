"""
Search Pipeline

Drives one search as an explicit stage machine:

    PLACE_SEARCH -> BATCH -> FETCH -> AGGREGATE -> MAYBE_RECURSE -> DONE
                      ^                                  |
                      +---------- (extra round) ---------+

Within a round every batch query runs concurrently and the round waits
for all of them (fetcher.fetch_all). Rounds run one after another: an
extra round is fed by the admin pages the previous aggregation found.
The number of extra rounds is capped by max_extra_rounds (default 1, so
admins of admins are never looked up).
"""

import logging
from dataclasses import replace
from enum import Enum
from typing import Any, List, Optional, Protocol, Sequence

from ..config import ID_BATCH_LIMIT
from ..config_manager import SearchConfig
from ..parsers import parse_place_search_response
from .aggregator import SessionState, aggregate_round
from .batching import batch_ids
from .queries import GraphQuery, build_events_queries, build_place_search_query

logger = logging.getLogger(__name__)


class Stage(Enum):
    PLACE_SEARCH = "place_search"
    BATCH = "batch"
    FETCH = "fetch"
    AGGREGATE = "aggregate"
    MAYBE_RECURSE = "maybe_recurse"
    DONE = "done"


class Fetcher(Protocol):
    async def fetch(self, query: GraphQuery) -> Any: ...
    async def fetch_all(self, queries: Sequence[GraphQuery]) -> List[Any]: ...


def should_recurse(candidates: Sequence[str], extra_rounds: int, max_extra_rounds: int) -> bool:
    """Whether newly discovered venues get another lookup round."""
    return bool(candidates) and extra_rounds < max_extra_rounds


class SearchPipeline:
    """Runs one search session against a fetcher.

    Args:
        config: Validated search configuration.
        fetcher: Object with async fetch(query) and fetch_all(queries).
        state: Starting session state (a fresh one by default).
        batch_limit: Maximum ids per lookup query.

    After run(), `history` lists the stages in the order they executed.
    """

    def __init__(
        self,
        config: SearchConfig,
        fetcher: Fetcher,
        state: Optional[SessionState] = None,
        batch_limit: int = ID_BATCH_LIMIT,
    ):
        self.config = config
        self.fetcher = fetcher
        self.state = state if state is not None else SessionState.start()
        self.batch_limit = batch_limit
        self.stage = Stage.PLACE_SEARCH
        self.history: List[Stage] = []
        self.round = 0

        self._refs: List[Any] = []
        self._batches: List[List[str]] = []
        self._bodies: List[Any] = []
        self._candidates: List[str] = []

    async def run(self) -> SessionState:
        """Run the stage machine to completion and return the final state."""
        handlers = {
            Stage.PLACE_SEARCH: self._place_search,
            Stage.BATCH: self._batch,
            Stage.FETCH: self._fetch,
            Stage.AGGREGATE: self._aggregate,
            Stage.MAYBE_RECURSE: self._maybe_recurse,
        }
        while self.stage is not Stage.DONE:
            self.history.append(self.stage)
            self.stage = await handlers[self.stage]()
        self.history.append(Stage.DONE)
        return self.state

    def _log(self, message: str):
        logger.debug(message)
        if self.config.verbose:
            print(message)

    async def _place_search(self) -> Stage:
        query = build_place_search_query(
            self.config.lat,
            self.config.lng,
            self.config.distance,
            self.config.access_token,
            self.config.version,
            self.config.query,
        )
        body = await self.fetcher.fetch(query)
        self._refs = parse_place_search_response(body)
        self._log(f"Place search returned {len(self._refs)} places")
        return Stage.BATCH

    async def _batch(self) -> Stage:
        self.round += 1
        batches, venues_count = batch_ids(self._refs, self.state.venues_count, self.batch_limit)
        self.state = replace(self.state, venues_count=venues_count)
        self._batches = batches
        id_count = sum(len(batch) for batch in batches)
        self._log(f"[Round {self.round}] {id_count} ids in {len(batches)} batches")
        return Stage.FETCH

    async def _fetch(self) -> Stage:
        queries = build_events_queries(
            self._batches,
            self.config.access_token,
            self.config.version,
            self.state.current_timestamp,
        )
        self._bodies = await self.fetcher.fetch_all(queries)
        return Stage.AGGREGATE

    async def _aggregate(self) -> Stage:
        result = aggregate_round(self.state, self._bodies)
        self.state = result.state
        self._candidates = result.candidates
        self._log(
            f"[Round {self.round}] Total: {len(self.state.venues)} venues, "
            f"{self.state.events_count} events, {len(self._candidates)} new admin pages"
        )
        return Stage.MAYBE_RECURSE

    async def _maybe_recurse(self) -> Stage:
        if should_recurse(self._candidates, self.state.extra_rounds, self.config.max_extra_rounds):
            self.state = replace(self.state, extra_rounds=self.state.extra_rounds + 1)
            self._refs = list(self._candidates)
            self._candidates = []
            return Stage.BATCH

        if self._candidates:
            logger.debug(
                "Round limit reached, discarding %d discovered venues", len(self._candidates)
            )
        return Stage.DONE
