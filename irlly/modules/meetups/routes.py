from fastapi import APIRouter, Depends
from irlly.database.supabase_client import get_supabase
from irlly.modules.meetups.schemas import MeetupCreate, MeetupUpdate, MeetupResponse
from irlly.modules.meetups.service import MeetupService
from irlly.core.access import AccessEvaluator
from irlly.core.dependencies import get_current_user_id, get_access_evaluator
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/meetups", tags=["meetups"])


def get_meetup_service(
    supabase: Client = Depends(get_supabase),
    evaluator: AccessEvaluator = Depends(get_access_evaluator)
) -> MeetupService:
    return MeetupService(supabase, evaluator)


@router.post("", response_model=MeetupResponse, status_code=201)
async def create_meetup(
    meetup_data: MeetupCreate,
    user_id: str = Depends(get_current_user_id),
    service: MeetupService = Depends(get_meetup_service)
):
    """Schedule a meetup for the selected circles"""
    return service.create_meetup(user_id, meetup_data)


@router.get("", response_model=List[MeetupResponse])
async def list_meetups(
    user_id: str = Depends(get_current_user_id),
    service: MeetupService = Depends(get_meetup_service)
):
    """Upcoming meetups visible to the signed-in user, soonest first"""
    return service.list_meetups(user_id)


@router.get("/{meetup_id}", response_model=MeetupResponse)
async def get_meetup(
    meetup_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: MeetupService = Depends(get_meetup_service)
):
    return service.get_meetup(user_id, str(meetup_id))


@router.put("/{meetup_id}", response_model=MeetupResponse)
async def update_meetup(
    meetup_id: UUID,
    meetup_data: MeetupUpdate,
    user_id: str = Depends(get_current_user_id),
    service: MeetupService = Depends(get_meetup_service)
):
    """Edit or reschedule a meetup (creator only)"""
    return service.update_meetup(user_id, str(meetup_id), meetup_data)


@router.delete("/{meetup_id}", status_code=204)
async def delete_meetup(
    meetup_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: MeetupService = Depends(get_meetup_service)
):
    """Cancel a meetup (creator only)"""
    service.delete_meetup(user_id, str(meetup_id))
    return None
