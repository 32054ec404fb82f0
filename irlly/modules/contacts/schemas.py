from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID

from irlly.modules.users.schemas import USERNAME_PATTERN, UserSummary, normalize_username


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    linked_user_id: Optional[UUID] = None
    username: Optional[str] = Field(None, pattern=USERNAME_PATTERN)
    phone_number: Optional[str] = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Contact name is required")
        return value

    @field_validator("username")
    @classmethod
    def lowercase_username(cls, value: Optional[str]) -> Optional[str]:
        return normalize_username(value) if value is not None else None


class ContactResponse(BaseModel):
    id: str
    owner_id: str
    linked_user_id: Optional[str] = None
    name: str
    username: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def is_registered(self) -> bool:
        return self.linked_user_id is not None

    class Config:
        from_attributes = True


class ContactWithUserResponse(ContactResponse):
    linked_user: Optional[UserSummary] = None
