"""User model (festival participants)."""

from typing import Optional

from sqlmodel import Field, SQLModel

from .base import CreatedAtMixin


class User(CreatedAtMixin, SQLModel, table=True):
    __tablename__ = "users"

    # "<college prefix>-<rest>", e.g. ay-101
    user_id: str = Field(primary_key=True, max_length=64)
    name: str = Field(nullable=False)
    email: Optional[str] = Field(default=None, index=True)
    phone_number: Optional[str] = None
    college_name: Optional[str] = None  # "faculty" for host-college staff
    department_name: Optional[str] = None
