"""
Time rules for pins and meetups.

Nothing here touches the database. Expiry is a comparison made at read time,
so no background job is needed to retire old events.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from irlly.config.settings import settings
from irlly.core.exceptions import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes from clients are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def pin_expires_at(created_at: datetime, ttl_hours: Optional[int] = None) -> datetime:
    hours = settings.pin_ttl_hours if ttl_hours is None else ttl_hours
    return ensure_utc(created_at) + timedelta(hours=hours)


def is_pin_live(pin, now: datetime) -> bool:
    return bool(pin.is_active) and ensure_utc(pin.expires_at) > ensure_utc(now)


def is_meetup_upcoming(meetup, now: datetime) -> bool:
    return ensure_utc(meetup.scheduled_for) >= ensure_utc(now)


def validate_scheduled_for(scheduled_for: datetime, now: Optional[datetime] = None) -> datetime:
    """Return scheduled_for in UTC, or raise if it is not strictly in the future."""
    scheduled_for = ensure_utc(scheduled_for)
    if scheduled_for <= ensure_utc(now or utcnow()):
        raise ValidationError("Scheduled time must be in the future")
    return scheduled_for
