from supabase import Client
from fastapi import HTTPException
from typing import Dict, List, Optional
import logging

from irlly.core.exceptions import StoreUnavailableError, ValidationError
from irlly.modules.events.schemas import EventBase, EventKind
from irlly.modules.pins.schemas import PinResponse
from irlly.modules.meetups.schemas import MeetupResponse

logger = logging.getLogger(__name__)

EVENT_TABLES = {
    EventKind.PIN: "pins",
    EventKind.MEETUP: "meetups",
}

EVENT_MODELS = {
    EventKind.PIN: PinResponse,
    EventKind.MEETUP: MeetupResponse,
}


class EventService:
    """Loading events of either kind together with the circles they are shared with."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_event(self, kind: EventKind, event_id: str) -> Optional[EventBase]:
        """Return the event with its shared-circle ids, or None when it does not exist"""
        try:
            result = self.supabase.table(EVENT_TABLES[kind])\
                .select("*")\
                .eq("id", event_id)\
                .limit(1)\
                .execute()

            if not result.data:
                return None

            circles = self.get_circle_ids_map(kind, [event_id]).get(event_id, [])
            return EVENT_MODELS[kind](**{**result.data[0], "circles": circles})
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching {kind.value} {event_id}: {e}")
            raise StoreUnavailableError() from e

    def with_circles(self, kind: EventKind, rows: List[dict]) -> List[EventBase]:
        """Build response models for raw event rows, fetching all their shares in one query"""
        if not rows:
            return []
        circle_map = self.get_circle_ids_map(kind, [row["id"] for row in rows])
        model = EVENT_MODELS[kind]
        return [model(**{**row, "circles": circle_map.get(row["id"], [])}) for row in rows]

    def get_circle_ids_map(self, kind: EventKind, event_ids: List[str]) -> Dict[str, List[str]]:
        if not event_ids:
            return {}
        try:
            result = self.supabase.table("event_circles")\
                .select("event_id, circle_id")\
                .eq("event_kind", kind.value)\
                .in_("event_id", event_ids)\
                .execute()

            circle_map: Dict[str, List[str]] = {}
            for share in result.data or []:
                circle_map.setdefault(share["event_id"], []).append(share["circle_id"])
            return circle_map
        except Exception as e:
            logger.error(f"Error fetching shares for {len(event_ids)} {kind.value}(s): {e}")
            raise StoreUnavailableError() from e

    def validate_circle_ids(self, creator_id: str, circle_ids: List[str]) -> List[str]:
        """Deduplicate circle_ids and check that every one is owned by creator_id"""
        unique_ids = list(dict.fromkeys(circle_ids))
        if not unique_ids:
            raise ValidationError("At least one circle must be selected")
        try:
            result = self.supabase.table("circles")\
                .select("id")\
                .eq("owner_id", creator_id)\
                .in_("id", unique_ids)\
                .execute()
        except Exception as e:
            logger.error(f"Error validating circles for user {creator_id}: {e}")
            raise StoreUnavailableError() from e

        owned = {c["id"] for c in result.data or []}
        unknown = [c for c in unique_ids if c not in owned]
        if unknown:
            raise ValidationError(f"Unknown circle ids: {', '.join(unknown)}")
        return unique_ids

    def share_with_circles(self, kind: EventKind, event_id: str, circle_ids: List[str]) -> List[str]:
        """Attach the event to circles. Best effort: the event row is already committed."""
        rows = [
            {"event_id": event_id, "event_kind": kind.value, "circle_id": circle_id}
            for circle_id in circle_ids
        ]
        try:
            self.supabase.table("event_circles")\
                .upsert(rows, on_conflict="event_id,event_kind,circle_id")\
                .execute()
            return circle_ids
        except Exception as e:
            logger.warning(f"Error sharing {kind.value} {event_id} with circles {circle_ids}: {e}")
            return []

    def delete_event_links(self, kind: EventKind, event_id: str) -> None:
        """Remove shares and RSVPs left behind by a deleted event. Best effort: the event row is already gone."""
        try:
            self.supabase.table("event_circles")\
                .delete()\
                .eq("event_id", event_id)\
                .eq("event_kind", kind.value)\
                .execute()

            self.supabase.table("rsvps")\
                .delete()\
                .eq("event_id", event_id)\
                .eq("event_kind", kind.value)\
                .execute()
        except Exception as e:
            logger.warning(f"Error removing links for deleted {kind.value} {event_id}: {e}")
