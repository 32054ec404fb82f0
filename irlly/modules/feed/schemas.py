from pydantic import BaseModel
from typing import Optional, List, Union

from irlly.modules.events.schemas import EventKind
from irlly.modules.meetups.schemas import MeetupResponse
from irlly.modules.pins.schemas import PinResponse
from irlly.modules.rsvps.schemas import RSVPStatus
from irlly.modules.users.schemas import UserSummary


class FeedItem(BaseModel):
    """One pin or meetup as it appears in a viewer's feed"""
    id: str
    kind: EventKind
    event: Union[PinResponse, MeetupResponse]
    creator: Optional[UserSummary] = None
    circles: List[str] = []
    attendee_count: int = 0
    attendees: List[UserSummary] = []
    viewer_response: Optional[RSVPStatus] = None
