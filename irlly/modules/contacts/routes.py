from fastapi import APIRouter, Depends
from irlly.database.supabase_client import get_supabase
from irlly.modules.contacts.schemas import ContactCreate, ContactResponse, ContactWithUserResponse
from irlly.modules.contacts.service import ContactService
from irlly.core.dependencies import get_current_user_id
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/contacts", tags=["contacts"])


def get_contact_service(supabase: Client = Depends(get_supabase)) -> ContactService:
    return ContactService(supabase)


@router.post("", response_model=ContactResponse, status_code=201)
async def create_contact(
    contact_data: ContactCreate,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service)
):
    """Add someone to the signed-in user's contacts"""
    return service.create_contact(user_id, contact_data)


@router.get("", response_model=List[ContactResponse])
async def list_contacts(
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service)
):
    return service.list_contacts(user_id)


@router.get("/registered", response_model=List[ContactWithUserResponse])
async def list_registered_contacts(
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service)
):
    """Contacts that have an account, with their profile"""
    return service.list_registered_contacts(user_id)


@router.delete("/{contact_id}", status_code=204)
async def delete_contact(
    contact_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ContactService = Depends(get_contact_service)
):
    service.delete_contact(user_id, str(contact_id))
    return None
