"""
Enrollment store: durable event registrations.

Uniqueness of (user, event) and existence of both ends are enforced by the
database. This module only translates the driver's constraint signals into
typed errors; it never pre-checks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.base import utcnow
from app.models.enrollment import EventRegistration
from app.models.event import Event

log = structlog.get_logger()

# PostgreSQL SQLSTATEs
PG_UNIQUE_VIOLATION = "23505"
PG_FOREIGN_KEY_VIOLATION = "23503"
# MySQL errnos (ER_DUP_ENTRY, ER_NO_REFERENCED_ROW_2)
MYSQL_DUP_ENTRY = 1062
MYSQL_NO_REFERENCED_ROW = 1452


class EnrollmentError(Exception):
    """Base class for enrollment store failures."""

    def __init__(self, user_id: str, event_id: str, detail: str = "") -> None:
        super().__init__(detail or f"{self.__class__.__name__}: {user_id} -> {event_id}")
        self.user_id = user_id
        self.event_id = event_id


class DuplicateEnrollment(EnrollmentError):
    """The user is already registered for this event."""


class UnknownReference(EnrollmentError):
    """The user or the event does not exist."""


class StoreUnavailable(EnrollmentError):
    """Any other persistence failure."""


def _driver_codes(exc: IntegrityError) -> set:
    """Collect sqlstate / errno style codes from the DBAPI error chain."""
    codes: set = set()
    candidates = [exc.orig, getattr(exc.orig, "__cause__", None)]
    for err in candidates:
        if err is None:
            continue
        for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
            value = getattr(err, attr, None)
            if value:
                codes.add(value)
        args = getattr(err, "args", ())
        if args and isinstance(args[0], int):
            codes.add(args[0])
    return codes


def classify_integrity_error(exc: IntegrityError) -> type[EnrollmentError]:
    """Map a constraint violation to DuplicateEnrollment or UnknownReference."""
    codes = _driver_codes(exc)
    if codes & {PG_UNIQUE_VIOLATION, MYSQL_DUP_ENTRY,
                "SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}:
        return DuplicateEnrollment
    if codes & {PG_FOREIGN_KEY_VIOLATION, MYSQL_NO_REFERENCED_ROW,
                "SQLITE_CONSTRAINT_FOREIGNKEY"}:
        return UnknownReference

    message = str(exc.orig).lower()
    if "unique" in message or "duplicate" in message:
        return DuplicateEnrollment
    if "foreign key" in message:
        return UnknownReference
    return StoreUnavailable


async def enroll(
    session: AsyncSession,
    user_id: str,
    event_id: str,
    payment_made: bool = False,
    registered_at: Optional[datetime] = None,
) -> EventRegistration:
    """Insert and commit one registration. Fails atomically."""
    values = {
        "user_id": user_id,
        "event_id": event_id,
        "payment_made": payment_made,
        "registration_time": registered_at or utcnow(),
    }
    try:
        await session.execute(insert(EventRegistration).values(**values))
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        error_cls = classify_integrity_error(exc)
        log.info(
            "enrollment.rejected",
            user_id=user_id,
            event_id=event_id,
            error=error_cls.__name__,
        )
        raise error_cls(user_id, event_id, str(exc.orig)) from exc
    except (SQLAlchemyError, OSError) as exc:
        await session.rollback()
        log.error("enrollment.store_error", user_id=user_id, event_id=event_id, error=str(exc))
        raise StoreUnavailable(user_id, event_id, str(exc)) from exc

    log.info("enrollment.created", user_id=user_id, event_id=event_id)
    return EventRegistration(**values)


async def list_user_enrollments(
    session: AsyncSession, user_id: str
) -> list[dict]:
    """All registrations for a user, with event names, oldest first."""
    result = await session.execute(
        select(EventRegistration, Event.name)
        .join(Event, Event.event_id == EventRegistration.event_id)
        .where(EventRegistration.user_id == user_id)
        .order_by(EventRegistration.registration_time)
    )
    return [
        {
            "user_id": reg.user_id,
            "event_id": reg.event_id,
            "event_name": event_name,
            "payment_made": reg.payment_made,
            "registration_time": reg.registration_time,
        }
        for reg, event_name in result.all()
    ]
