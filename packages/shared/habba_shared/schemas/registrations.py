"""Event registration schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .common import Tier


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class RegistrationRequest(BaseModel):
    """Register the calling user for an event."""
    event_id: str = Field(min_length=1, max_length=64)
    device_id: str = Field(min_length=1)


class TopicSubscriptionRequest(BaseModel):
    """Subscribe a device to the festival-wide broadcast topic."""
    device_id: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class EnrollmentResponse(BaseModel):
    """A single event registration."""
    user_id: str
    event_id: str
    event_name: Optional[str] = None
    payment_made: bool = False
    registration_time: datetime


class RegistrationResponse(BaseModel):
    """Returned after a successful registration."""
    enrollment: EnrollmentResponse
    tier: Tier
    subscribed: bool  # Advisory: False never means the registration failed


class EnrollmentListResponse(BaseModel):
    """All registrations of a user."""
    data: List[EnrollmentResponse]


class TopicSubscriptionResponse(BaseModel):
    topic: str
    subscribed: bool
