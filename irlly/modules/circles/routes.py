from fastapi import APIRouter, Depends
from irlly.database.supabase_client import get_supabase
from irlly.modules.circles.schemas import (
    CircleCreate, CircleUpdate, CircleResponse, CircleWithMembersResponse,
    CircleMembersAdd, CircleMemberResponse, MemberCirclesResponse
)
from irlly.modules.circles.service import CircleService
from irlly.core.access import CircleMembershipResolver
from irlly.core.dependencies import get_current_user_id, get_circle_resolver
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/circles", tags=["circles"])


def get_circle_service(
    supabase: Client = Depends(get_supabase),
    resolver: CircleMembershipResolver = Depends(get_circle_resolver)
) -> CircleService:
    return CircleService(supabase, resolver)


@router.post("", response_model=CircleResponse, status_code=201)
async def create_circle(
    circle_data: CircleCreate,
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Create a new circle"""
    return service.create_circle(user_id, circle_data)


@router.get("", response_model=List[CircleWithMembersResponse])
async def list_circles(
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """List the signed-in user's circles with their members"""
    return service.list_circles(user_id)


@router.get("/shared-with-me", response_model=MemberCirclesResponse)
async def list_member_circles(
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Circles other users have added the signed-in user to"""
    return MemberCirclesResponse(circle_ids=service.list_member_circle_ids(user_id))


@router.put("/{circle_id}", response_model=CircleResponse)
async def update_circle(
    circle_id: UUID,
    circle_data: CircleUpdate,
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Update circle (owner only)"""
    return service.update_circle(str(circle_id), user_id, circle_data)


@router.delete("/{circle_id}", status_code=204)
async def delete_circle(
    circle_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Delete circle (owner only)"""
    service.delete_circle(str(circle_id), user_id)
    return None


@router.post("/{circle_id}/contacts", response_model=List[CircleMemberResponse])
async def add_contacts(
    circle_id: UUID,
    members: CircleMembersAdd,
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Add contacts to the circle (owner only)"""
    return service.add_contacts(str(circle_id), user_id, [str(c) for c in members.contact_ids])


@router.delete("/{circle_id}/contacts/{contact_id}", status_code=204)
async def remove_contact(
    circle_id: UUID,
    contact_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: CircleService = Depends(get_circle_service)
):
    """Remove a contact from the circle (owner only)"""
    service.remove_contact(str(circle_id), user_id, str(contact_id))
    return None
