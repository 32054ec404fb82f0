from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from irlly.modules.events.schemas import EventBase


class PinCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    note: Optional[str] = Field(None, max_length=500)
    emoji: Optional[str] = Field(None, max_length=10)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    address: Optional[str] = Field(None, max_length=200)
    circle_ids: List[UUID] = Field(..., min_length=1)

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title is required")
        return value


class PinUpdate(BaseModel):
    is_active: Optional[bool] = None


class PinResponse(EventBase):
    note: Optional[str] = None
    is_active: bool = True
    expires_at: datetime
