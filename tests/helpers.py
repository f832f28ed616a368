"""Payload builders and a fake fetcher shared by the tests."""
from __future__ import annotations

import json

from fb_events_extractor.exceptions import FetchError


def location(lat: float = 40.71, lng: float = -73.96, city: str = "New York") -> dict:
    return {"city": city, "country": "United States", "latitude": lat, "longitude": lng}


def admin(admin_id: str, profile_type: str = "page") -> dict:
    return {"id": admin_id, "name": f"Admin {admin_id}", "profile_type": profile_type}


def event(event_id: str, admins=(), **extra) -> dict:
    data = {
        "id": event_id,
        "name": f"Event {event_id}",
        "type": "public",
        "cover": {"id": f"c{event_id}", "source": f"https://img.example/{event_id}.jpg"},
        "picture": {"data": {"url": f"https://img.example/{event_id}-p.jpg"}},
        "description": "Live music",
        "start_time": "2030-06-01T20:00:00+0000",
        "end_time": "2030-06-01T23:00:00+0000",
        "attending_count": 10,
        "declined_count": 1,
        "maybe_count": 5,
        "noreply_count": 3,
        "admins": {"data": list(admins)},
    }
    data.update(extra)
    return data


def venue(venue_id: str, events=None, loc=None, **extra) -> dict:
    data = {
        "id": venue_id,
        "name": f"Venue {venue_id}",
        "about": "A venue",
        "category_list": [{"id": "1", "name": "Bar"}],
        "link": f"https://facebook.example/{venue_id}",
        "username": f"venue{venue_id}",
        "emails": [f"{venue_id}@example.com"],
        "cover": {"id": "c", "source": f"https://img.example/v{venue_id}.jpg"},
        "picture": {"data": {"url": f"https://img.example/v{venue_id}-p.jpg"}},
    }
    if loc is not None:
        data["location"] = loc
    if events is not None:
        data["events"] = {"data": list(events)}
    data.update(extra)
    return data


def body(*venues: dict) -> str:
    """A batched lookup response containing the given venues, in order."""
    return json.dumps({v["id"]: v for v in venues})


class FakeFetcher:
    """Answers place searches and batched lookups from in-memory payloads.

    `rounds` records the ids requested by each fetch_all call.
    """

    def __init__(self, places=(), venues=(), fail_ids=()):
        self.places = list(places)
        self.venues = {v["id"]: v for v in venues}
        self.fail_ids = set(fail_ids)
        self.searches = []
        self.rounds = []
        self.queries = []

    @property
    def calls(self) -> int:
        return len(self.searches) + len(self.queries)

    async def fetch(self, query):
        if query.path.endswith("search"):
            self.searches.append(query)
            return json.dumps({"data": self.places, "paging": {}})
        self.queries.append(query)
        failing = self.fail_ids.intersection(query.ids)
        if failing:
            raise FetchError(f"API error: 500 - venue {sorted(failing)[0]}")
        return json.dumps({i: self.venues[i] for i in query.ids if i in self.venues})

    async def fetch_all(self, queries):
        self.rounds.append([i for q in queries for i in q.ids])
        return [await self.fetch(q) for q in queries]
