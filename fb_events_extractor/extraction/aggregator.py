"""
Event Aggregation

Folds the venue payloads of one round into the session state.

Attribution: an event is credited to a venue only when that venue is one
of the event's admins. Venues echoing events they do not administer never
own them.

Location back-fill: admin pages often have no location of their own. If a
located venue returned the same event earlier, its location is borrowed
and stays with the venue for the rest of its events.

Admins that are pages and have not been seen yet are returned as
candidates for another lookup round (see extraction.pipeline).
"""

import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from ..models import Event
from ..parsers import EventPayload, VenuePayload, parse_venues_response

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """Accumulated state of one search session.

    current_timestamp is captured once and used as the `since` filter of
    every round, so later rounds query the same time window.
    """

    current_timestamp: int
    venues: List[str] = field(default_factory=list)
    venues_count: int = 0
    venues_with_events: int = 0
    events: List[Event] = field(default_factory=list)
    locations: Dict[str, Dict] = field(default_factory=dict)
    event_locations: Dict[str, str] = field(default_factory=dict)
    emitted: Set[Tuple[str, str]] = field(default_factory=set)
    extra_rounds: int = 0

    @classmethod
    def start(cls, timestamp: Optional[int] = None) -> "SessionState":
        if timestamp is None:
            timestamp = round(time.time())
        return cls(current_timestamp=timestamp)

    @property
    def events_count(self) -> int:
        return len(self.events)

    def copy(self) -> "SessionState":
        return replace(
            self,
            venues=list(self.venues),
            events=list(self.events),
            locations=dict(self.locations),
            event_locations=dict(self.event_locations),
            emitted=set(self.emitted),
        )

    def metadata(self) -> Dict[str, int]:
        return {
            "venues": self.venues_count,
            "venuesWithEvents": self.venues_with_events,
            "events": self.events_count,
        }


@dataclass
class RoundResult:
    """Output of one aggregation pass"""
    state: SessionState
    candidates: List[str] = field(default_factory=list)


def borrowed_location(state: SessionState, event_id: str) -> Optional[Dict]:
    """
    Location of the venue that last supplied one for `event_id`, if any.

    Used for venues whose own payload has no location.
    """
    source_venue = state.event_locations.get(event_id)
    if source_venue is None:
        return None
    return state.locations.get(source_venue)


def fold_venue(
    state: SessionState,
    venue: VenuePayload,
    seen: Set[str],
    candidates: Dict[str, None],
) -> None:
    """Fold one venue payload into `state` (which must be a private copy).

    An unlocated venue takes the location borrowed for its first locatable
    event and keeps it for the rest of its events, which are then recorded
    in event_locations like those of any located venue.
    """
    if venue.id in seen:
        logger.debug("Venue %s already folded, skipping", venue.id)
        return
    seen.add(venue.id)
    state.venues.append(venue.id)

    venue_location = venue.location
    if venue_location:
        state.locations[venue.id] = venue_location

    if not venue.events:
        return

    state.venues_with_events += 1

    for event in venue.events:
        if venue_location:
            state.event_locations[event.id] = venue.id
        else:
            venue_location = borrowed_location(state, event.id)
            if venue_location is None:
                logger.debug("Event %s under venue %s has no location, dropped", event.id, venue.id)
                continue
            state.locations[venue.id] = venue_location

        is_admin = False
        for admin in event.admins:
            if admin.id == venue.id:
                is_admin = True
            elif admin.is_page and admin.id not in seen and admin.id not in candidates:
                candidates[admin.id] = None

        if not is_admin:
            continue

        key = (event.id, venue.id)
        if key in state.emitted:
            continue
        state.emitted.add(key)
        state.events.append(Event.from_payload(event, venue, venue_location))


def aggregate_round(state: SessionState, bodies: Sequence[Any]) -> RoundResult:
    """
    Merge all response bodies of one round into a new session state.

    Args:
        state: State before this round (left untouched)
        bodies: Raw batched-lookup responses, one per query

    Returns:
        RoundResult with the updated state and the newly discovered venue
        ids, in discovery order

    Raises:
        PayloadError: If a body is malformed
        GraphAPIError: If a body is a Graph API error payload
    """
    new_state = state.copy()
    seen = set(new_state.venues)
    candidates: Dict[str, None] = {}

    for body in bodies:
        for venue in parse_venues_response(body).values():
            fold_venue(new_state, venue, seen, candidates)

    # A candidate may have been folded later in the same round
    discovered = [venue_id for venue_id in candidates if venue_id not in seen]

    logger.debug(
        "Round folded: %d venues, %d events, %d new candidates",
        len(new_state.venues), new_state.events_count, len(discovered),
    )
    return RoundResult(state=new_state, candidates=discovered)
