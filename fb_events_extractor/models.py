"""
Result records.

Event records are built once, when an event is attributed to a venue,
and are not modified afterwards. to_dict() produces the camelCase shape
described by EVENTS_RESPONSE_SCHEMA.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .parsers import EventPayload, VenuePayload


@dataclass(frozen=True)
class Venue:
    """Snapshot of the owning venue at attribution time"""
    id: str
    name: str
    about: Optional[str] = None
    categories: Optional[List[Dict]] = None
    link: Optional[str] = None
    username: Optional[str] = None
    emails: Optional[List[str]] = None
    cover_picture: Optional[str] = None
    profile_picture: Optional[str] = None
    location: Optional[Dict] = None

    @classmethod
    def from_payload(cls, venue: VenuePayload, location: Optional[Dict]) -> "Venue":
        return cls(
            id=venue.id,
            name=venue.name,
            about=venue.about,
            categories=venue.categories,
            link=venue.link,
            username=venue.username,
            emails=venue.emails,
            cover_picture=venue.cover_source,
            profile_picture=venue.picture_url,
            location=location,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "about": self.about,
            "emails": self.emails,
            "coverPicture": self.cover_picture,
            "profilePicture": self.profile_picture,
            "categories": self.categories,
            "link": self.link,
            "username": self.username,
            "location": self.location,
        }


@dataclass(frozen=True)
class EventStats:
    attending: Optional[int] = None
    declined: Optional[int] = None
    maybe: Optional[int] = None
    noreply: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attending": self.attending,
            "declined": self.declined,
            "maybe": self.maybe,
            "noreply": self.noreply,
        }


@dataclass(frozen=True)
class Event:
    """An event attributed to one venue"""
    id: str
    name: str
    venue: Venue
    type: Optional[str] = None
    cover_picture: Optional[str] = None
    profile_picture: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    stats: EventStats = field(default_factory=EventStats)

    @classmethod
    def from_payload(
        cls,
        event: EventPayload,
        venue: VenuePayload,
        location: Optional[Dict],
    ) -> "Event":
        """Denormalize an event and its owning venue into one record."""
        return cls(
            id=event.id,
            name=event.name,
            type=event.type,
            cover_picture=event.cover_source,
            profile_picture=event.picture_url,
            description=event.description,
            start_time=event.start_time,
            end_time=event.end_time,
            stats=EventStats(
                attending=event.attending_count,
                declined=event.declined_count,
                maybe=event.maybe_count,
                noreply=event.noreply_count,
            ),
            venue=Venue.from_payload(venue, location),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "coverPicture": self.cover_picture,
            "profilePicture": self.profile_picture,
            "description": self.description,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "stats": self.stats.to_dict(),
            "venue": self.venue.to_dict(),
        }
