from supabase import Client
from irlly.core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from irlly.modules.contacts.schemas import ContactCreate, ContactResponse, ContactWithUserResponse
from irlly.modules.users.service import UserService
from typing import List, Set
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ContactService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.users = UserService(supabase)

    def create_contact(self, owner_id: str, contact_data: ContactCreate) -> ContactResponse:
        """Add a contact. It is linked to an account by explicit id, or by looking up its handle."""
        linked_user_id = None
        if contact_data.linked_user_id is not None:
            linked_user_id = self.users.get_user_by_id(str(contact_data.linked_user_id)).id
        elif contact_data.username:
            match = self.users.get_user_by_username(contact_data.username)
            linked_user_id = match.id if match else None

        if linked_user_id == owner_id:
            raise ValidationError("You cannot add yourself as a contact")

        try:
            result = self.supabase.table("contacts").insert({
                "owner_id": owner_id,
                "linked_user_id": linked_user_id,
                "name": contact_data.name,
                "username": contact_data.username,
                "phone_number": contact_data.phone_number
            }).execute()

            if not result.data:
                raise StoreUnavailableError("Failed to create contact")

            logger.info(f"User {owner_id} added contact {result.data[0]['id']} (linked: {linked_user_id is not None})")
            return ContactResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating contact for user {owner_id}: {e}")
            raise StoreUnavailableError() from e

    def list_contacts(self, owner_id: str) -> List[ContactResponse]:
        """List the owner's contacts by name"""
        try:
            result = self.supabase.table("contacts")\
                .select("*")\
                .eq("owner_id", owner_id)\
                .order("name")\
                .execute()

            return [ContactResponse(**contact) for contact in result.data or []]
        except Exception as e:
            logger.error(f"Error listing contacts for user {owner_id}: {e}")
            raise StoreUnavailableError() from e

    def list_registered_contacts(self, owner_id: str) -> List[ContactWithUserResponse]:
        """Contacts linked to an account, each with that account's public profile"""
        contacts = [c for c in self.list_contacts(owner_id) if c.is_registered]
        summaries = self.users.get_summaries([c.linked_user_id for c in contacts])
        return [
            ContactWithUserResponse(
                **contact.model_dump(exclude={"is_registered"}),
                linked_user=summaries.get(contact.linked_user_id)
            )
            for contact in contacts
        ]

    def get_owned_contact_ids(self, owner_id: str, contact_ids: List[str]) -> Set[str]:
        """The subset of contact_ids that belong to owner_id"""
        if not contact_ids:
            return set()
        try:
            result = self.supabase.table("contacts")\
                .select("id")\
                .eq("owner_id", owner_id)\
                .in_("id", contact_ids)\
                .execute()

            return {c["id"] for c in result.data or []}
        except Exception as e:
            logger.error(f"Error checking contacts for user {owner_id}: {e}")
            raise StoreUnavailableError() from e

    def delete_contact(self, owner_id: str, contact_id: str) -> bool:
        """Delete a contact and drop it from every circle it was in"""
        if not self.get_owned_contact_ids(owner_id, [contact_id]):
            raise NotFoundError("Contact not found")
        try:
            self.supabase.table("circle_members")\
                .delete()\
                .eq("contact_id", contact_id)\
                .execute()

            result = self.supabase.table("contacts")\
                .delete()\
                .eq("id", contact_id)\
                .eq("owner_id", owner_id)\
                .execute()

            return len(result.data) > 0
        except Exception as e:
            logger.error(f"Error deleting contact {contact_id}: {e}")
            raise StoreUnavailableError() from e
