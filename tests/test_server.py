"""Tests for the FastAPI server."""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fb_events_extractor import server
from fb_events_extractor.config import ACCESS_TOKEN_ENV, EVENTS_RESPONSE_SCHEMA
from fb_events_extractor.extractor import EventSearch

from helpers import FakeFetcher, admin, event, location, venue


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(ACCESS_TOKEN_ENV, raising=False)
    return TestClient(server.app)


def _use_fetcher(monkeypatch, fetcher):
    """Make every EventSearch built by the server use `fetcher`."""
    original = EventSearch.from_options.__func__

    def from_options(cls, options, **kwargs):
        return original(cls, options, fetcher=fetcher, **kwargs)

    monkeypatch.setattr(EventSearch, "from_options", classmethod(from_options))


class TestEndpoints:
    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_schema(self, client):
        assert client.get("/api/schema").json() == EVENTS_RESPONSE_SCHEMA

    def test_search(self, client, monkeypatch):
        fetcher = FakeFetcher(
            places=[{"id": "V"}],
            venues=[venue("V", events=[event("E", admins=[admin("V")])], loc=location())],
        )
        _use_fetcher(monkeypatch, fetcher)

        response = client.post("/api/search", json={"lat": 40.71, "lng": -73.96, "accessToken": "tok"})
        assert response.status_code == 200
        data = response.json()
        assert data["metadata"] == {"venues": 1, "venuesWithEvents": 1, "events": 1}
        assert data["events"][0]["venue"]["id"] == "V"

    def test_missing_coordinates(self, client):
        response = client.post("/api/search", json={"accessToken": "tok"})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == 1

    def test_missing_token(self, client):
        response = client.post("/api/search", json={"lat": 1, "lng": 2})
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == 2

    def test_upstream_failure(self, client, monkeypatch):
        _use_fetcher(monkeypatch, FakeFetcher(places=["V"], fail_ids=["V"]))
        response = client.post("/api/search", json={"lat": 1, "lng": 2, "accessToken": "tok"})
        assert response.status_code == 502
        assert response.json()["detail"]["code"] == -1
