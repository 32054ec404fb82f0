"""
Feed assembly.

Live pins and upcoming meetups are fetched, filtered through the shared
AccessEvaluator, annotated with attendance and merged into one list. Pins
always lead; pins run newest first and meetups soonest first.
"""

from supabase import Client
from irlly.core.access import AccessEvaluator
from irlly.modules.events.lifecycle import ensure_utc, utcnow
from irlly.modules.events.schemas import EventBase, EventKind
from irlly.modules.feed.schemas import FeedItem
from irlly.modules.meetups.service import MeetupService
from irlly.modules.pins.service import PinService
from irlly.modules.rsvps.service import RSVPAggregator
from irlly.modules.users.service import UserService
from typing import List, Optional, Tuple
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


def feed_sort_key(item: FeedItem) -> Tuple[int, float]:
    if item.kind == EventKind.PIN:
        return (0, -ensure_utc(item.event.created_at).timestamp())
    return (1, ensure_utc(item.event.scheduled_for).timestamp())


class FeedAssembler:
    def __init__(self, supabase: Client, evaluator: Optional[AccessEvaluator] = None):
        self.supabase = supabase
        self.evaluator = evaluator or AccessEvaluator(supabase)
        self.pins = PinService(supabase, self.evaluator)
        self.meetups = MeetupService(supabase, self.evaluator)
        self.aggregator = RSVPAggregator(supabase)
        self.users = UserService(supabase)

    def _annotate(self, viewer_id: str, kind: EventKind, events: List[EventBase]) -> List[FeedItem]:
        summaries = self.aggregator.aggregate_many(kind, [e.id for e in events], viewer_id)
        creators = self.users.get_summaries([e.creator_id for e in events])
        items = []
        for event in events:
            rsvp_summary = summaries[event.id]
            items.append(FeedItem(
                id=f"{kind.value}-{event.id}",
                kind=kind,
                event=event,
                creator=creators.get(event.creator_id),
                circles=event.circles,
                attendee_count=rsvp_summary.attendee_count,
                attendees=rsvp_summary.attendees,
                viewer_response=rsvp_summary.viewer_response
            ))
        return items

    def build_feed(self, viewer_id: str, now: Optional[datetime] = None) -> List[FeedItem]:
        """Everything currently visible to viewer_id, pins first. Read only."""
        now = now or utcnow()
        pins = self.evaluator.filter_accessible(viewer_id, self.pins.fetch_live_pins(now))
        meetups = self.evaluator.filter_accessible(viewer_id, self.meetups.fetch_upcoming_meetups(now))

        items = self._annotate(viewer_id, EventKind.PIN, pins)
        items.extend(self._annotate(viewer_id, EventKind.MEETUP, meetups))
        items.sort(key=feed_sort_key)

        logger.debug(f"Built feed for user {viewer_id}: {len(pins)} pin(s), {len(meetups)} meetup(s)")
        return items
