from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from enum import Enum
from uuid import UUID

from irlly.modules.events.schemas import EventKind
from irlly.modules.users.schemas import UserSummary


class RSVPStatus(str, Enum):
    ATTENDING = "attending"
    NOT_ATTENDING = "not_attending"


class RSVPCreate(BaseModel):
    event_id: UUID
    event_kind: EventKind
    response: RSVPStatus


class RSVPResponse(BaseModel):
    id: str
    user_id: str
    event_id: str
    event_kind: EventKind
    response: RSVPStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RSVPWithUserResponse(RSVPResponse):
    user: Optional[UserSummary] = None


class RSVPSummary(BaseModel):
    """Attendance for one event as seen by one viewer. viewer_response is None until they answer."""
    event_id: str
    event_kind: EventKind
    attendees: List[UserSummary] = []
    attendee_count: int = 0
    viewer_response: Optional[RSVPStatus] = None
