"""Event registration (join table). One row per (user, event)."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import utcnow


class EventRegistration(SQLModel, table=True):
    __tablename__ = "event_registrations"

    user_id: str = Field(foreign_key="users.user_id", primary_key=True)
    event_id: str = Field(foreign_key="events.event_id", primary_key=True, index=True)
    payment_made: bool = Field(default=False, nullable=False)
    registration_time: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
