from supabase import Client
from irlly.core.access import AccessEvaluator
from irlly.core.exceptions import StoreUnavailableError
from irlly.modules.events.lifecycle import utcnow
from irlly.modules.events.schemas import EventKind
from irlly.modules.rsvps.schemas import (
    RSVPCreate, RSVPResponse, RSVPWithUserResponse, RSVPStatus, RSVPSummary
)
from irlly.modules.users.schemas import UserSummary
from irlly.modules.users.service import UserService
from typing import Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class RSVPAggregator:
    """Attendee lists and counts. Callers are expected to have checked access already."""

    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)

    def aggregate(self, event_id: str, event_kind: EventKind, viewer_id: str) -> RSVPSummary:
        return self.aggregate_many(event_kind, [event_id], viewer_id)[event_id]

    def aggregate_many(self, event_kind: EventKind, event_ids: List[str], viewer_id: str) -> Dict[str, RSVPSummary]:
        """One RSVP query and one users query for a whole batch of events of the same kind"""
        if not event_ids:
            return {}
        try:
            result = self.supabase.table("rsvps")\
                .select("user_id, event_id, response, created_at")\
                .eq("event_kind", event_kind.value)\
                .in_("event_id", event_ids)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching RSVPs for {len(event_ids)} {event_kind.value}(s): {e}")
            raise StoreUnavailableError() from e

        rsvps = result.data or []
        attending = [r for r in rsvps if r["response"] == RSVPStatus.ATTENDING.value]
        summaries = self.users.get_summaries([r["user_id"] for r in attending])

        aggregated = {
            event_id: RSVPSummary(event_id=event_id, event_kind=event_kind)
            for event_id in event_ids
        }
        for rsvp in rsvps:
            summary = aggregated.get(rsvp["event_id"])
            if summary is None:
                continue
            if rsvp["user_id"] == viewer_id:
                summary.viewer_response = RSVPStatus(rsvp["response"])
            if rsvp["response"] == RSVPStatus.ATTENDING.value:
                summary.attendees.append(
                    summaries.get(rsvp["user_id"]) or UserSummary(id=rsvp["user_id"])
                )
        for summary in aggregated.values():
            summary.attendee_count = len(summary.attendees)
        return aggregated


class RSVPService:
    def __init__(self, supabase: Client, evaluator: Optional[AccessEvaluator] = None):
        self.supabase = supabase
        self.evaluator = evaluator or AccessEvaluator(supabase)
        self.aggregator = RSVPAggregator(supabase)

    def upsert_rsvp(self, user_id: str, rsvp_data: RSVPCreate) -> RSVPResponse:
        """Record the user's answer, replacing any earlier one for the same event"""
        event_id = str(rsvp_data.event_id)
        self.evaluator.require_access(user_id, rsvp_data.event_kind, event_id)
        try:
            result = self.supabase.table("rsvps")\
                .upsert({
                    "user_id": user_id,
                    "event_id": event_id,
                    "event_kind": rsvp_data.event_kind.value,
                    "response": rsvp_data.response.value,
                    "updated_at": utcnow().isoformat()
                }, on_conflict="user_id,event_id,event_kind")\
                .execute()

            if not result.data:
                raise StoreUnavailableError("Failed to update RSVP")

            logger.info(f"User {user_id} RSVP'd {rsvp_data.response.value} to {rsvp_data.event_kind.value} {event_id}")
            return RSVPResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving RSVP for user {user_id} on {event_id}: {e}")
            raise StoreUnavailableError() from e

    def list_rsvps(self, viewer_id: str, event_kind: EventKind, event_id: str) -> List[RSVPWithUserResponse]:
        """Every RSVP on an event the viewer can see, oldest first"""
        self.evaluator.require_access(viewer_id, event_kind, event_id)
        try:
            result = self.supabase.table("rsvps")\
                .select("*")\
                .eq("event_id", event_id)\
                .eq("event_kind", event_kind.value)\
                .order("created_at")\
                .execute()
        except Exception as e:
            logger.error(f"Error listing RSVPs for {event_kind.value} {event_id}: {e}")
            raise StoreUnavailableError() from e

        rsvps = result.data or []
        summaries = self.aggregator.users.get_summaries([r["user_id"] for r in rsvps])
        return [RSVPWithUserResponse(**rsvp, user=summaries.get(rsvp["user_id"])) for rsvp in rsvps]

    def get_user_rsvp(self, user_id: str, event_kind: EventKind, event_id: str) -> Optional[RSVPResponse]:
        self.evaluator.require_access(user_id, event_kind, event_id)
        try:
            result = self.supabase.table("rsvps")\
                .select("*")\
                .eq("user_id", user_id)\
                .eq("event_id", event_id)\
                .eq("event_kind", event_kind.value)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching RSVP for user {user_id} on {event_id}: {e}")
            raise StoreUnavailableError() from e

        return RSVPResponse(**result.data[0]) if result.data else None

    def delete_rsvp(self, user_id: str, event_kind: EventKind, event_id: str) -> bool:
        """Withdraw the user's answer entirely, back to no response recorded"""
        self.evaluator.require_access(user_id, event_kind, event_id)
        try:
            result = self.supabase.table("rsvps")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("event_id", event_id)\
                .eq("event_kind", event_kind.value)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting RSVP for user {user_id} on {event_id}: {e}")
            raise StoreUnavailableError() from e

    def get_summary(self, viewer_id: str, event_kind: EventKind, event_id: str) -> RSVPSummary:
        self.evaluator.require_access(viewer_id, event_kind, event_id)
        return self.aggregator.aggregate(event_id, event_kind, viewer_id)
