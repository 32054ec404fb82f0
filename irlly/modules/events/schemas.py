from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum


class EventKind(str, Enum):
    PIN = "pin"
    MEETUP = "meetup"


class EventBase(BaseModel):
    """Fields shared by pins and meetups. `circles` holds the shared-circle ids."""
    id: str
    creator_id: str
    title: str
    emoji: Optional[str] = None
    latitude: float
    longitude: float
    address: Optional[str] = None
    circles: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
