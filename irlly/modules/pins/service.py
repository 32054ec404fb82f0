from supabase import Client
from irlly.core.access import AccessEvaluator
from irlly.core.exceptions import NotFoundError, StoreUnavailableError
from irlly.modules.events.lifecycle import is_pin_live, pin_expires_at, utcnow
from irlly.modules.events.schemas import EventKind
from irlly.modules.pins.schemas import PinCreate, PinUpdate, PinResponse
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class PinService:
    def __init__(self, supabase: Client, evaluator: Optional[AccessEvaluator] = None):
        self.supabase = supabase
        self.evaluator = evaluator or AccessEvaluator(supabase)
        self.events = self.evaluator.events

    def create_pin(self, creator_id: str, pin_data: PinCreate, now: Optional[datetime] = None) -> PinResponse:
        """Drop a pin that expires PIN_TTL_HOURS from now and share it with the given circles"""
        circle_ids = self.events.validate_circle_ids(creator_id, [str(c) for c in pin_data.circle_ids])
        created_at = now or utcnow()
        try:
            result = self.supabase.table("pins").insert({
                "creator_id": creator_id,
                "title": pin_data.title,
                "note": pin_data.note,
                "emoji": pin_data.emoji,
                "latitude": pin_data.latitude,
                "longitude": pin_data.longitude,
                "address": pin_data.address,
                "is_active": True,
                "created_at": created_at.isoformat(),
                "expires_at": pin_expires_at(created_at).isoformat()
            }).execute()

            if not result.data:
                raise StoreUnavailableError("Failed to create pin")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating pin for user {creator_id}: {e}")
            raise StoreUnavailableError() from e

        pin = result.data[0]
        shared = self.events.share_with_circles(EventKind.PIN, pin["id"], circle_ids)
        logger.info(f"User {creator_id} dropped pin {pin['id']} for {len(shared)} circle(s)")
        return PinResponse(**{**pin, "circles": shared})

    def fetch_live_pins(self, now: Optional[datetime] = None) -> List[PinResponse]:
        """Every active, unexpired pin, newest first, before any access filtering"""
        now = now or utcnow()
        try:
            result = self.supabase.table("pins")\
                .select("*")\
                .eq("is_active", True)\
                .gt("expires_at", now.isoformat())\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching live pins: {e}")
            raise StoreUnavailableError() from e

        return self.events.with_circles(EventKind.PIN, result.data or [])

    def list_pins(self, viewer_id: str, now: Optional[datetime] = None) -> List[PinResponse]:
        """Live pins the viewer created or that were shared with a circle they are in"""
        return self.evaluator.filter_accessible(viewer_id, self.fetch_live_pins(now))

    def get_pin(self, viewer_id: str, pin_id: str, now: Optional[datetime] = None) -> PinResponse:
        pin = self.evaluator.require_access(viewer_id, EventKind.PIN, pin_id)
        if not is_pin_live(pin, now or utcnow()):
            raise NotFoundError("Pin not found")
        return pin

    def update_pin(self, viewer_id: str, pin_id: str, pin_data: PinUpdate) -> PinResponse:
        """Creator-only. Setting is_active to false cancels the pin early."""
        pin = self.evaluator.require_creator(viewer_id, EventKind.PIN, pin_id)
        if pin_data.is_active is None:
            return pin
        try:
            result = self.supabase.table("pins")\
                .update({"is_active": pin_data.is_active, "updated_at": utcnow().isoformat()})\
                .eq("id", pin_id)\
                .eq("creator_id", viewer_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Pin not found")

            return PinResponse(**{**result.data[0], "circles": pin.circles})
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating pin {pin_id}: {e}")
            raise StoreUnavailableError() from e

    def delete_pin(self, viewer_id: str, pin_id: str) -> bool:
        self.evaluator.require_creator(viewer_id, EventKind.PIN, pin_id)
        try:
            result = self.supabase.table("pins")\
                .delete()\
                .eq("id", pin_id)\
                .eq("creator_id", viewer_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting pin {pin_id}: {e}")
            raise StoreUnavailableError() from e

        self.events.delete_event_links(EventKind.PIN, pin_id)
        logger.info(f"Pin {pin_id} deleted by user {viewer_id}")
        return len(result.data) > 0
