from fastapi import APIRouter, Depends, Query
from irlly.database.supabase_client import get_supabase
from irlly.modules.users.schemas import UserUpdate, UserResponse, UsernameAvailability, USERNAME_PATTERN
from irlly.modules.users.service import UserService
from irlly.core.dependencies import get_current_user_id
from supabase import Client

router = APIRouter(prefix="/users", tags=["users"])


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("/me", response_model=UserResponse)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Get the signed-in user's profile"""
    return service.get_user_by_id(user_id)


@router.put("/me", response_model=UserResponse)
async def update_profile(
    user_data: UserUpdate,
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Update name, handle or avatar"""
    return service.update_user(user_id, user_data)


@router.get("/check-username", response_model=UsernameAvailability)
async def check_username(
    username: str = Query(..., pattern=USERNAME_PATTERN),
    user_id: str = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service)
):
    """Whether a handle is free (a user's own handle counts as available to them)"""
    available = service.is_username_available(username, exclude_user_id=user_id)
    return UsernameAvailability(username=username.lower(), available=available)
