from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from irlly.modules.contacts.schemas import ContactResponse


class CircleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)
    emoji: Optional[str] = Field(None, max_length=10)
    contact_ids: List[UUID] = []

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Circle name is required")
        return value


class CircleUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    emoji: Optional[str] = Field(None, max_length=10)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Circle name is required")
        return value


class CircleResponse(BaseModel):
    id: str
    owner_id: str
    name: str
    emoji: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CircleWithMembersResponse(CircleResponse):
    members: List[ContactResponse] = []


class CircleMembersAdd(BaseModel):
    contact_ids: List[UUID] = Field(..., min_length=1)


class CircleMemberResponse(BaseModel):
    id: str
    circle_id: str
    contact_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class MemberCirclesResponse(BaseModel):
    circle_ids: List[str]
