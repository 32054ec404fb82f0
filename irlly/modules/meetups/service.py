from supabase import Client
from irlly.core.access import AccessEvaluator
from irlly.core.exceptions import NotFoundError, StoreUnavailableError
from irlly.modules.events.lifecycle import utcnow, validate_scheduled_for
from irlly.modules.events.schemas import EventKind
from irlly.modules.meetups.schemas import MeetupCreate, MeetupUpdate, MeetupResponse
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class MeetupService:
    def __init__(self, supabase: Client, evaluator: Optional[AccessEvaluator] = None):
        self.supabase = supabase
        self.evaluator = evaluator or AccessEvaluator(supabase)
        self.events = self.evaluator.events

    def create_meetup(self, creator_id: str, meetup_data: MeetupCreate, now: Optional[datetime] = None) -> MeetupResponse:
        """Schedule a meetup in the future and share it with the given circles"""
        now = now or utcnow()
        scheduled_for = validate_scheduled_for(meetup_data.scheduled_for, now)
        circle_ids = self.events.validate_circle_ids(creator_id, [str(c) for c in meetup_data.circle_ids])
        try:
            result = self.supabase.table("meetups").insert({
                "creator_id": creator_id,
                "title": meetup_data.title,
                "description": meetup_data.description,
                "emoji": meetup_data.emoji,
                "latitude": meetup_data.latitude,
                "longitude": meetup_data.longitude,
                "address": meetup_data.address,
                "scheduled_for": scheduled_for.isoformat(),
                "created_at": now.isoformat()
            }).execute()

            if not result.data:
                raise StoreUnavailableError("Failed to create meetup")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating meetup for user {creator_id}: {e}")
            raise StoreUnavailableError() from e

        meetup = result.data[0]
        shared = self.events.share_with_circles(EventKind.MEETUP, meetup["id"], circle_ids)
        logger.info(f"User {creator_id} scheduled meetup {meetup['id']} for {len(shared)} circle(s)")
        return MeetupResponse(**{**meetup, "circles": shared})

    def fetch_upcoming_meetups(self, now: Optional[datetime] = None) -> List[MeetupResponse]:
        """Every meetup scheduled at or after now, soonest first, before any access filtering"""
        now = now or utcnow()
        try:
            result = self.supabase.table("meetups")\
                .select("*")\
                .gte("scheduled_for", now.isoformat())\
                .order("scheduled_for")\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching upcoming meetups: {e}")
            raise StoreUnavailableError() from e

        return self.events.with_circles(EventKind.MEETUP, result.data or [])

    def list_meetups(self, viewer_id: str, now: Optional[datetime] = None) -> List[MeetupResponse]:
        """Upcoming meetups the viewer created or that were shared with a circle they are in"""
        return self.evaluator.filter_accessible(viewer_id, self.fetch_upcoming_meetups(now))

    def get_meetup(self, viewer_id: str, meetup_id: str) -> MeetupResponse:
        return self.evaluator.require_access(viewer_id, EventKind.MEETUP, meetup_id)

    def update_meetup(
        self,
        viewer_id: str,
        meetup_id: str,
        meetup_data: MeetupUpdate,
        now: Optional[datetime] = None
    ) -> MeetupResponse:
        """Creator-only edit. A new scheduled_for must again be in the future."""
        update_data = {}
        if meetup_data.title is not None:
            update_data["title"] = meetup_data.title.strip()
        if meetup_data.description is not None:
            update_data["description"] = meetup_data.description
        if meetup_data.scheduled_for is not None:
            update_data["scheduled_for"] = validate_scheduled_for(meetup_data.scheduled_for, now).isoformat()

        meetup = self.evaluator.require_creator(viewer_id, EventKind.MEETUP, meetup_id)
        if not update_data:
            return meetup
        update_data["updated_at"] = utcnow().isoformat()

        try:
            result = self.supabase.table("meetups")\
                .update(update_data)\
                .eq("id", meetup_id)\
                .eq("creator_id", viewer_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Meetup not found")

            return MeetupResponse(**{**result.data[0], "circles": meetup.circles})
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating meetup {meetup_id}: {e}")
            raise StoreUnavailableError() from e

    def delete_meetup(self, viewer_id: str, meetup_id: str) -> bool:
        """Cancel a meetup. Its shares and RSVPs are removed with it."""
        meetup = self.evaluator.require_creator(viewer_id, EventKind.MEETUP, meetup_id)
        try:
            result = self.supabase.table("meetups")\
                .delete()\
                .eq("id", meetup_id)\
                .eq("creator_id", viewer_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting meetup {meetup_id}: {e}")
            raise StoreUnavailableError() from e

        self.events.delete_event_links(EventKind.MEETUP, meetup_id)
        logger.info(f'Meetup "{meetup.title}" ({meetup_id}) cancelled by user {viewer_id}')
        return len(result.data) > 0
