from fastapi import APIRouter, Depends
from irlly.database.supabase_client import get_supabase
from irlly.modules.pins.schemas import PinCreate, PinUpdate, PinResponse
from irlly.modules.pins.service import PinService
from irlly.core.access import AccessEvaluator
from irlly.core.dependencies import get_current_user_id, get_access_evaluator
from supabase import Client
from typing import List
from uuid import UUID

router = APIRouter(prefix="/pins", tags=["pins"])


def get_pin_service(
    supabase: Client = Depends(get_supabase),
    evaluator: AccessEvaluator = Depends(get_access_evaluator)
) -> PinService:
    return PinService(supabase, evaluator)


@router.post("", response_model=PinResponse, status_code=201)
async def create_pin(
    pin_data: PinCreate,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service)
):
    """Drop a pin for the selected circles"""
    return service.create_pin(user_id, pin_data)


@router.get("", response_model=List[PinResponse])
async def list_pins(
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service)
):
    """Live pins visible to the signed-in user, newest first"""
    return service.list_pins(user_id)


@router.get("/{pin_id}", response_model=PinResponse)
async def get_pin(
    pin_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service)
):
    return service.get_pin(user_id, str(pin_id))


@router.put("/{pin_id}", response_model=PinResponse)
async def update_pin(
    pin_id: UUID,
    pin_data: PinUpdate,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service)
):
    """Activate or cancel a pin (creator only)"""
    return service.update_pin(user_id, str(pin_id), pin_data)


@router.delete("/{pin_id}", status_code=204)
async def delete_pin(
    pin_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: PinService = Depends(get_pin_service)
):
    service.delete_pin(user_id, str(pin_id))
    return None
