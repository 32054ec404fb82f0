from supabase import Client
from irlly.core.access import CircleMembershipResolver
from irlly.core.exceptions import ForbiddenError, NotFoundError, StoreUnavailableError, ValidationError
from irlly.modules.circles.schemas import (
    CircleCreate, CircleUpdate, CircleResponse, CircleWithMembersResponse, CircleMemberResponse
)
from irlly.modules.contacts.schemas import ContactResponse
from irlly.modules.contacts.service import ContactService
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class CircleService:
    def __init__(self, supabase: Client, resolver: Optional[CircleMembershipResolver] = None):
        self.supabase = supabase
        self.resolver = resolver or CircleMembershipResolver(supabase)
        self.contacts = ContactService(supabase)

    def _validate_contact_ids(self, owner_id: str, contact_ids: List[str]) -> List[str]:
        """Members must be contacts the circle owner holds"""
        unique_ids = list(dict.fromkeys(contact_ids))
        owned = self.contacts.get_owned_contact_ids(owner_id, unique_ids)
        unknown = [c for c in unique_ids if c not in owned]
        if unknown:
            raise ValidationError(f"Unknown contact ids: {', '.join(unknown)}")
        return unique_ids

    def _upsert_members(self, circle_id: str, contact_ids: List[str]) -> List[CircleMemberResponse]:
        rows = [{"circle_id": circle_id, "contact_id": contact_id} for contact_id in contact_ids]
        result = self.supabase.table("circle_members")\
            .upsert(rows, on_conflict="circle_id,contact_id")\
            .execute()
        return [CircleMemberResponse(**member) for member in result.data or []]

    def create_circle(self, owner_id: str, circle_data: CircleCreate) -> CircleResponse:
        """Create a circle, optionally seeded with some of the owner's contacts"""
        contact_ids = self._validate_contact_ids(owner_id, [str(c) for c in circle_data.contact_ids])
        try:
            result = self.supabase.table("circles").insert({
                "owner_id": owner_id,
                "name": circle_data.name,
                "emoji": circle_data.emoji
            }).execute()

            if not result.data:
                raise StoreUnavailableError("Failed to create circle")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating circle for user {owner_id}: {e}")
            raise StoreUnavailableError() from e

        circle = CircleResponse(**result.data[0])
        if contact_ids:
            try:
                self._upsert_members(circle.id, contact_ids)
            except Exception as e:
                # The circle itself exists; members can be added again later
                logger.warning(f"Error adding initial members to circle {circle.id}: {e}")
        return circle

    def get_owned_circle(self, circle_id: str, user_id: str) -> CircleResponse:
        """
        Fetch a circle for modification by its owner.

        Circles the caller cannot see at all are reported as missing. Circles the
        caller is a member of but does not own are forbidden.
        """
        try:
            result = self.supabase.table("circles")\
                .select("*")\
                .eq("id", circle_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching circle {circle_id}: {e}")
            raise StoreUnavailableError() from e

        if not result.data:
            raise NotFoundError("Circle not found")

        circle = CircleResponse(**result.data[0])
        if circle.owner_id != user_id:
            if circle.id in self.resolver.resolve_viewer_circles(user_id):
                raise ForbiddenError("Only the circle owner can modify this circle")
            raise NotFoundError("Circle not found")
        return circle

    def list_circles(self, owner_id: str) -> List[CircleWithMembersResponse]:
        """List the owner's circles, oldest first, each with its member contacts"""
        try:
            circles_result = self.supabase.table("circles")\
                .select("*")\
                .eq("owner_id", owner_id)\
                .order("created_at")\
                .execute()
            circles = circles_result.data or []
            if not circles:
                return []

            members_result = self.supabase.table("circle_members")\
                .select("circle_id, contact_id")\
                .in_("circle_id", [c["id"] for c in circles])\
                .execute()
            memberships = members_result.data or []

            contacts = {}
            contact_ids = list({m["contact_id"] for m in memberships})
            if contact_ids:
                contacts_result = self.supabase.table("contacts")\
                    .select("*")\
                    .in_("id", contact_ids)\
                    .execute()
                contacts = {c["id"]: ContactResponse(**c) for c in contacts_result.data or []}

            members_by_circle = {}
            for membership in memberships:
                contact = contacts.get(membership["contact_id"])
                if contact:
                    members_by_circle.setdefault(membership["circle_id"], []).append(contact)

            return [
                CircleWithMembersResponse(**circle, members=members_by_circle.get(circle["id"], []))
                for circle in circles
            ]
        except Exception as e:
            logger.error(f"Error listing circles for user {owner_id}: {e}")
            raise StoreUnavailableError() from e

    def update_circle(self, circle_id: str, user_id: str, circle_data: CircleUpdate) -> CircleResponse:
        """Rename a circle or change its emoji"""
        circle = self.get_owned_circle(circle_id, user_id)
        update_data = {}
        if circle_data.name is not None:
            update_data["name"] = circle_data.name.strip()
        if circle_data.emoji is not None:
            update_data["emoji"] = circle_data.emoji
        if not update_data:
            return circle
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.supabase.table("circles")\
                .update(update_data)\
                .eq("id", circle_id)\
                .eq("owner_id", user_id)\
                .execute()

            if not result.data:
                raise NotFoundError("Circle not found")

            return CircleResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating circle {circle_id}: {e}")
            raise StoreUnavailableError() from e

    def delete_circle(self, circle_id: str, user_id: str) -> bool:
        """Delete a circle along with its memberships and event shares"""
        self.get_owned_circle(circle_id, user_id)
        try:
            result = self.supabase.table("circles")\
                .delete()\
                .eq("id", circle_id)\
                .eq("owner_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting circle {circle_id}: {e}")
            raise StoreUnavailableError() from e

        try:
            self.supabase.table("circle_members")\
                .delete()\
                .eq("circle_id", circle_id)\
                .execute()

            self.supabase.table("event_circles")\
                .delete()\
                .eq("circle_id", circle_id)\
                .execute()
        except Exception as e:
            # Both tables cascade on circles.id
            logger.warning(f"Error removing links for deleted circle {circle_id}: {e}")

        logger.info(f"Circle {circle_id} deleted by user {user_id}")
        return len(result.data) > 0

    def add_contacts(self, circle_id: str, user_id: str, contact_ids: List[str]) -> List[CircleMemberResponse]:
        """Add contacts to a circle. Contacts already in it are left as they are."""
        self.get_owned_circle(circle_id, user_id)
        contact_ids = self._validate_contact_ids(user_id, contact_ids)
        try:
            return self._upsert_members(circle_id, contact_ids)
        except Exception as e:
            logger.error(f"Error adding contacts to circle {circle_id}: {e}")
            raise StoreUnavailableError() from e

    def remove_contact(self, circle_id: str, user_id: str, contact_id: str) -> bool:
        self.get_owned_circle(circle_id, user_id)
        try:
            result = self.supabase.table("circle_members")\
                .delete()\
                .eq("circle_id", circle_id)\
                .eq("contact_id", contact_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error removing contact {contact_id} from circle {circle_id}: {e}")
            raise StoreUnavailableError() from e

    def list_member_circle_ids(self, viewer_id: str) -> List[str]:
        """Ids of circles other users have placed the viewer in"""
        return sorted(self.resolver.resolve_member_circles(viewer_id))
