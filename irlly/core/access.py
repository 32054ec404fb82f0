"""
Event visibility.

A viewer can see an event when they created it, or when the creator filed a
contact pointing at the viewer's account and put that contact in one of the
circles the event is shared with. Every read and write path that touches an
event goes through AccessEvaluator so they all apply the same rule.
"""

from supabase import Client
from typing import Any, Dict, Iterable, List, Optional, Set
import logging

from irlly.core.exceptions import ForbiddenError, NotFoundError, StoreUnavailableError
from irlly.modules.events.schemas import EventBase, EventKind
from irlly.modules.events.service import EventService

logger = logging.getLogger(__name__)


class CircleMembershipResolver:
    """Finds the circles a viewer belongs to. Results are memoised in `cache` for the request."""

    def __init__(self, supabase: Client, cache: Optional[Dict[str, Any]] = None):
        self.supabase = supabase
        self.cache = cache if cache is not None else {}

    def resolve_member_circles(self, viewer_id: str) -> Set[str]:
        """Circles owned by other users that hold a contact linked to viewer_id"""
        cache_key = f"member_circles:{viewer_id}"
        if cache_key in self.cache:
            return self.cache[cache_key]
        try:
            contacts_result = self.supabase.table("contacts")\
                .select("id")\
                .eq("linked_user_id", viewer_id)\
                .execute()
            contact_ids = [c["id"] for c in contacts_result.data or []]

            circle_ids: Set[str] = set()
            if contact_ids:
                members_result = self.supabase.table("circle_members")\
                    .select("circle_id")\
                    .in_("contact_id", contact_ids)\
                    .execute()
                circle_ids = {m["circle_id"] for m in members_result.data or []}
        except Exception as e:
            logger.error(f"Error resolving member circles for user {viewer_id}: {e}")
            raise StoreUnavailableError() from e

        self.cache[cache_key] = circle_ids
        return circle_ids

    def resolve_owned_circles(self, viewer_id: str) -> Set[str]:
        cache_key = f"owned_circles:{viewer_id}"
        if cache_key in self.cache:
            return self.cache[cache_key]
        try:
            result = self.supabase.table("circles")\
                .select("id")\
                .eq("owner_id", viewer_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error resolving owned circles for user {viewer_id}: {e}")
            raise StoreUnavailableError() from e

        circle_ids = {c["id"] for c in result.data or []}
        self.cache[cache_key] = circle_ids
        return circle_ids

    def resolve_viewer_circles(self, viewer_id: str) -> Set[str]:
        """Every circle the viewer is reachable through: those they are a member of plus those they own"""
        return self.resolve_member_circles(viewer_id) | self.resolve_owned_circles(viewer_id)


class AccessEvaluator:
    def __init__(
        self,
        supabase: Client,
        resolver: Optional[CircleMembershipResolver] = None,
        cache: Optional[Dict[str, Any]] = None
    ):
        self.supabase = supabase
        self.resolver = resolver or CircleMembershipResolver(supabase, cache)
        self.events = EventService(supabase)

    def can_access(self, viewer_id: str, event: EventBase) -> bool:
        if event.creator_id == viewer_id:
            return True
        # A viewer's own circles can only be shared on their own events, which
        # the creator check already covers.
        member_circles = self.resolver.resolve_member_circles(viewer_id)
        return any(circle_id in member_circles for circle_id in event.circles)

    def filter_accessible(self, viewer_id: str, events: Iterable[EventBase]) -> List[EventBase]:
        return [event for event in events if self.can_access(viewer_id, event)]

    def require_access(self, viewer_id: str, kind: EventKind, event_id: str) -> EventBase:
        """Load an event the viewer may see. Missing and invisible events both raise NotFoundError."""
        event = self.events.get_event(kind, event_id)
        if event is None or not self.can_access(viewer_id, event):
            logger.debug(f"User {viewer_id} denied {kind.value} {event_id}")
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        return event

    def require_creator(self, viewer_id: str, kind: EventKind, event_id: str) -> EventBase:
        """Load an event the viewer may modify: visible to them and created by them"""
        event = self.require_access(viewer_id, kind, event_id)
        if event.creator_id != viewer_id:
            raise ForbiddenError(f"Only the creator can modify this {kind.value}")
        return event
