from supabase import Client
from irlly.core.exceptions import NotFoundError, StoreUnavailableError, ValidationError
from irlly.modules.users.schemas import UserUpdate, UserResponse, UserSummary, normalize_username
from typing import Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: Exception) -> bool:
    """PostgREST reports Postgres error codes on APIError.code"""
    return getattr(error, "code", None) == UNIQUE_VIOLATION or "duplicate key" in str(error)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_user_by_id(self, user_id: str) -> UserResponse:
        """Get user profile by ID"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise NotFoundError("User not found")

            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching user {user_id}: {e}")
            raise StoreUnavailableError() from e

    def get_user_by_username(self, username: str) -> Optional[UserResponse]:
        """Get user profile by handle, ignoring case"""
        try:
            result = self.supabase.table("users")\
                .select("*")\
                .eq("username", normalize_username(username))\
                .limit(1)\
                .execute()

            if not result.data:
                return None

            return UserResponse(**result.data[0])
        except Exception as e:
            logger.error(f"Error looking up username {username}: {e}")
            raise StoreUnavailableError() from e

    def is_username_available(self, username: str, exclude_user_id: Optional[str] = None) -> bool:
        existing = self.get_user_by_username(username)
        return existing is None or existing.id == exclude_user_id

    def get_summaries(self, user_ids: List[str]) -> Dict[str, UserSummary]:
        """Minimal public profiles keyed by id. Unknown ids are left out."""
        unique_ids = list(dict.fromkeys(user_ids))
        if not unique_ids:
            return {}
        try:
            result = self.supabase.table("users")\
                .select("id, name, username, avatar_url")\
                .in_("id", unique_ids)\
                .execute()

            return {user["id"]: UserSummary(**user) for user in result.data or []}
        except Exception as e:
            logger.error(f"Error fetching {len(unique_ids)} user summaries: {e}")
            raise StoreUnavailableError() from e

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update user profile"""
        if user_data.username and not self.is_username_available(user_data.username, exclude_user_id=user_id):
            raise ValidationError("Username is already taken")

        try:
            update_data = {"updated_at": datetime.now(timezone.utc).isoformat()}
            if user_data.name is not None:
                update_data["name"] = user_data.name.strip()
            if user_data.username is not None:
                update_data["username"] = user_data.username
            if user_data.avatar_url is not None:
                update_data["avatar_url"] = user_data.avatar_url

            result = self.supabase.table("users")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise NotFoundError("User not found")

            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            if user_data.username and is_unique_violation(e):
                # Another account claimed the handle after the availability check
                raise ValidationError("Username is already taken") from e
            logger.error(f"Error updating user {user_id}: {e}")
            raise StoreUnavailableError() from e
