"""Tests for Graph API payload parsing."""
from __future__ import annotations

import json

import pytest

from fb_events_extractor.exceptions import GraphAPIError, PayloadError
from fb_events_extractor.parsers import parse_place_search_response, parse_venues_response

from helpers import admin, body, event, location, venue


class TestParseVenuesResponse:
    def test_typed_payloads(self):
        raw = body(venue("1", events=[event("e1", admins=[admin("1"), admin("u", "user")])], loc=location()))
        venues = parse_venues_response(raw)

        v = venues["1"]
        assert v.name == "Venue 1"
        assert v.location["city"] == "New York"
        assert v.cover_source == "https://img.example/v1.jpg"
        assert v.picture_url == "https://img.example/v1-p.jpg"
        assert v.categories == [{"id": "1", "name": "Bar"}]

        e = v.events[0]
        assert e.id == "e1"
        assert e.attending_count == 10
        assert [a.id for a in e.admins] == ["1", "u"]
        assert e.admins[0].is_page
        assert not e.admins[1].is_page

    def test_preserves_response_order(self):
        raw = body(venue("b"), venue("a"), venue("c"))
        assert list(parse_venues_response(raw)) == ["b", "a", "c"]

    def test_optional_fields_default_to_none(self):
        raw = json.dumps({"1": {"name": "Bare"}})
        v = parse_venues_response(raw)["1"]
        assert v.location is None
        assert v.emails is None
        assert v.events == []

    def test_accepts_decoded_json(self):
        assert "1" in parse_venues_response({"1": {"name": "Bare"}})

    def test_invalid_json(self):
        with pytest.raises(PayloadError):
            parse_venues_response("not json {")

    def test_non_object_body(self):
        with pytest.raises(PayloadError):
            parse_venues_response("[1, 2]")

    def test_error_payload(self):
        raw = json.dumps({"error": {"message": "Invalid OAuth access token.", "type": "OAuthException", "code": 190}})
        with pytest.raises(GraphAPIError) as exc_info:
            parse_venues_response(raw)
        assert exc_info.value.message == "Invalid OAuth access token."
        assert exc_info.value.api_code == 190

    def test_event_without_id(self):
        bad = event("e1")
        del bad["id"]
        with pytest.raises(PayloadError, match="'id'"):
            parse_venues_response(body(venue("1", events=[bad])))

    def test_admin_without_id(self):
        raw = body(venue("1", events=[event("e1", admins=[{"name": "x"}])]))
        with pytest.raises(PayloadError):
            parse_venues_response(raw)

    def test_venue_without_name(self):
        with pytest.raises(PayloadError, match="Venue 1"):
            parse_venues_response(json.dumps({"1": {"id": "1"}}))

    def test_malformed_events_edge(self):
        with pytest.raises(PayloadError):
            parse_venues_response(json.dumps({"1": {"name": "x", "events": {"data": "oops"}}}))


class TestParsePlaceSearchResponse:
    def test_data_list(self):
        raw = json.dumps({"data": [{"id": "1"}, {"id": "2"}], "paging": {}})
        assert parse_place_search_response(raw) == [{"id": "1"}, {"id": "2"}]

    def test_plain_list(self):
        assert parse_place_search_response(["1", "2"]) == ["1", "2"]

    def test_missing_data(self):
        with pytest.raises(PayloadError):
            parse_place_search_response(json.dumps({"paging": {}}))

    def test_error_payload(self):
        with pytest.raises(GraphAPIError):
            parse_place_search_response(json.dumps({"error": {"message": "bad"}}))
