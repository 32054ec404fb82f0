from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

USERNAME_PATTERN = r"^[a-zA-Z0-9_]{3,30}$"


def normalize_username(username: str) -> str:
    """Handles are unique case-insensitively, so they are stored lowercase"""
    return username.strip().lower()


class UserSummary(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    username: Optional[str] = Field(None, pattern=USERNAME_PATTERN)
    avatar_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("username")
    @classmethod
    def lowercase_username(cls, value: Optional[str]) -> Optional[str]:
        return normalize_username(value) if value is not None else None


class UserResponse(BaseModel):
    id: str
    name: Optional[str] = None
    username: Optional[str] = None
    avatar_url: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UsernameAvailability(BaseModel):
    username: str
    available: bool
