from fastapi import APIRouter, Depends, Query
from irlly.database.supabase_client import get_supabase
from irlly.modules.events.schemas import EventKind
from irlly.modules.rsvps.schemas import RSVPCreate, RSVPResponse, RSVPWithUserResponse, RSVPSummary
from irlly.modules.rsvps.service import RSVPService
from irlly.core.access import AccessEvaluator
from irlly.core.dependencies import get_current_user_id, get_access_evaluator
from supabase import Client
from typing import List, Optional
from uuid import UUID

router = APIRouter(prefix="/rsvps", tags=["rsvps"])


def get_rsvp_service(
    supabase: Client = Depends(get_supabase),
    evaluator: AccessEvaluator = Depends(get_access_evaluator)
) -> RSVPService:
    return RSVPService(supabase, evaluator)


@router.post("", response_model=RSVPResponse)
async def upsert_rsvp(
    rsvp_data: RSVPCreate,
    user_id: str = Depends(get_current_user_id),
    service: RSVPService = Depends(get_rsvp_service)
):
    """Answer attending / not attending. Answering again replaces the earlier answer."""
    return service.upsert_rsvp(user_id, rsvp_data)


@router.get("", response_model=List[RSVPWithUserResponse])
async def list_rsvps(
    event_id: UUID,
    event_kind: EventKind = Query(...),
    user_id: str = Depends(get_current_user_id),
    service: RSVPService = Depends(get_rsvp_service)
):
    return service.list_rsvps(user_id, event_kind, str(event_id))


@router.get("/{event_id}", response_model=Optional[RSVPResponse])
async def get_my_rsvp(
    event_id: UUID,
    event_kind: EventKind = Query(...),
    user_id: str = Depends(get_current_user_id),
    service: RSVPService = Depends(get_rsvp_service)
):
    """The signed-in user's own answer, or null if they have not answered"""
    return service.get_user_rsvp(user_id, event_kind, str(event_id))


@router.delete("/{event_id}", status_code=204)
async def delete_rsvp(
    event_id: UUID,
    event_kind: EventKind = Query(...),
    user_id: str = Depends(get_current_user_id),
    service: RSVPService = Depends(get_rsvp_service)
):
    service.delete_rsvp(user_id, event_kind, str(event_id))
    return None


@router.get("/{event_id}/summary", response_model=RSVPSummary)
async def get_rsvp_summary(
    event_id: UUID,
    event_kind: EventKind = Query(...),
    user_id: str = Depends(get_current_user_id),
    service: RSVPService = Depends(get_rsvp_service)
):
    """Attendees, attendee count and the viewer's own answer"""
    return service.get_summary(user_id, event_kind, str(event_id))
