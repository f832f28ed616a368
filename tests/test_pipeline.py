"""Tests for the search stage machine and the recursion bound."""
from __future__ import annotations

import asyncio

import pytest

from fb_events_extractor.config_manager import SearchConfig
from fb_events_extractor.exceptions import FetchError
from fb_events_extractor.extraction.aggregator import SessionState
from fb_events_extractor.extraction.pipeline import SearchPipeline, Stage, should_recurse

from helpers import FakeFetcher, admin, event, location, venue


def _config(**overrides) -> SearchConfig:
    values = {"lat": 40.71, "lng": -73.96, "access_token": "tok"}
    values.update(overrides)
    return SearchConfig(**values)


def _run(fetcher, **overrides):
    pipeline = SearchPipeline(_config(**overrides), fetcher, state=SessionState.start(1500000000))
    state = asyncio.run(pipeline.run())
    return pipeline, state


def _admin_chain_fetcher():
    """V (located) -> admin page P -> admin page Q.

    Neither admin page has a location; both borrow it through shared events.
    """
    return FakeFetcher(
        places=[{"id": "V"}],
        venues=[
            venue("V", events=[event("E", admins=[admin("V"), admin("P")])], loc=location()),
            venue("P", events=[event("E", admins=[admin("V"), admin("P")]),
                               event("F", admins=[admin("P"), admin("Q")])]),
            venue("Q", events=[event("F", admins=[admin("Q")])]),
        ],
    )


class TestShouldRecurse:
    def test_no_candidates(self):
        assert not should_recurse([], 0, 1)

    def test_candidates_within_limit(self):
        assert should_recurse(["P"], 0, 1)

    def test_limit_reached(self):
        assert not should_recurse(["P"], 1, 1)

    def test_recursion_disabled(self):
        assert not should_recurse(["P"], 0, 0)


class TestSingleRound:
    def test_stages_without_recursion(self):
        fetcher = FakeFetcher(
            places=[{"id": "V"}],
            venues=[venue("V", events=[event("E", admins=[admin("V")])], loc=location())],
        )
        pipeline, state = _run(fetcher)
        assert pipeline.history == [
            Stage.PLACE_SEARCH, Stage.BATCH, Stage.FETCH,
            Stage.AGGREGATE, Stage.MAYBE_RECURSE, Stage.DONE,
        ]
        assert fetcher.rounds == [["V"]]
        assert state.extra_rounds == 0
        assert [e.venue.location for e in state.events] == [location()]

    def test_large_place_list_is_batched(self):
        places = [{"id": str(i)} for i in range(120)] + [{"name": "no id"}]
        fetcher = FakeFetcher(places=places)
        _, state = _run(fetcher)
        assert [len(q.ids) for q in fetcher.queries] == [50, 50, 20]
        assert state.venues_count == 121

    def test_no_places(self):
        fetcher = FakeFetcher(places=[])
        _, state = _run(fetcher)
        assert fetcher.queries == []
        assert state.metadata() == {"venues": 0, "venuesWithEvents": 0, "events": 0}


class TestRecursion:
    def test_admin_page_fetched_in_second_round(self):
        fetcher = _admin_chain_fetcher()
        pipeline, state = _run(fetcher)

        assert fetcher.rounds == [["V"], ["P"]]
        assert state.extra_rounds == 1
        assert pipeline.history.count(Stage.BATCH) == 2
        assert [(e.id, e.venue.id) for e in state.events] == [("E", "V"), ("E", "P"), ("F", "P")]
        # P has no location of its own; it borrows V's through E
        assert [e.venue.location for e in state.events[1:]] == [location(), location()]

    def test_third_level_admins_are_not_resolved(self):
        fetcher = _admin_chain_fetcher()
        pipeline, state = _run(fetcher)
        assert pipeline.history[-2:] == [Stage.MAYBE_RECURSE, Stage.DONE]
        assert "Q" not in state.venues
        assert len(fetcher.rounds) == 2

    def test_venues_count_includes_recursive_round(self):
        _, state = _run(_admin_chain_fetcher())
        assert state.venues_count == 2
        assert state.venues == ["V", "P"]

    def test_every_round_uses_session_timestamp(self):
        fetcher = _admin_chain_fetcher()
        _run(fetcher)
        assert len(fetcher.queries) == 2
        assert all(q.params["fields"].endswith(".since(1500000000)") for q in fetcher.queries)

    def test_recursion_can_be_disabled(self):
        fetcher = _admin_chain_fetcher()
        _, state = _run(fetcher, max_extra_rounds=0)
        assert fetcher.rounds == [["V"]]
        assert state.extra_rounds == 0

    def test_more_rounds_when_configured(self):
        fetcher = _admin_chain_fetcher()
        _, state = _run(fetcher, max_extra_rounds=2)
        assert fetcher.rounds == [["V"], ["P"], ["Q"]]
        assert ("F", "Q") in [(e.id, e.venue.id) for e in state.events]


class TestFailures:
    def test_fetch_failure_propagates(self):
        fetcher = FakeFetcher(places=[{"id": "V"}], fail_ids=["V"])
        pipeline = SearchPipeline(_config(), fetcher)
        with pytest.raises(FetchError):
            asyncio.run(pipeline.run())
        assert pipeline.stage is Stage.FETCH

    def test_failure_in_recursive_round_propagates(self):
        fetcher = _admin_chain_fetcher()
        fetcher.fail_ids = {"P"}
        with pytest.raises(FetchError):
            _run(fetcher)
