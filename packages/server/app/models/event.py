"""Event model. Tier is derived from the registration policy, not stored."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin


class Event(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "events"

    event_id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False)
    description: Optional[str] = None
    venue: Optional[str] = None
    fee: int = Field(default=0, nullable=False)
    organizer_id: Optional[str] = Field(default=None, index=True)
