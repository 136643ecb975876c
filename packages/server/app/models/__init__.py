# SQLModel definitions, imported here to ensure metadata is populated for Alembic.
from .base import CreatedAtMixin  # noqa: F401
from .user import User  # noqa: F401
from .event import Event  # noqa: F401
from .enrollment import EventRegistration  # noqa: F401
