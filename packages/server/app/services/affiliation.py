"""
Affiliation lookup: who a requester is, from their id and the user directory.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.user import User

log = structlog.get_logger()

ID_SEPARATOR = "-"
DEFAULT_LOOKUP_TIMEOUT_SECONDS = 5.0


class LookupFailed(Exception):
    """The directory could not answer for this requester."""

    NOT_FOUND = "not_found"
    UNAVAILABLE = "unavailable"

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"Affiliation lookup failed for {user_id!r}: {reason}")
        self.user_id = user_id
        self.reason = reason


def resolve_affiliation_prefix(user_id: str) -> Optional[str]:
    """
    First segment of a structured id: "ay-101" -> "ay".

    Ids without a separator, or with an empty first segment, have no prefix.
    """
    head, sep, _ = user_id.partition(ID_SEPARATOR)
    if not sep or not head:
        return None
    return head


async def _college_name(session: AsyncSession, user_id: str) -> tuple[bool, Optional[str]]:
    result = await session.execute(
        select(User.user_id, User.college_name).where(User.user_id == user_id)
    )
    row = result.one_or_none()
    if row is None:
        return False, None
    return True, row.college_name


async def _release(session: AsyncSession) -> None:
    # a cancelled query can leave the connection mid-statement
    try:
        await session.rollback()
    except (SQLAlchemyError, OSError) as exc:
        log.warning("affiliation.rollback_failed", error=str(exc))


async def is_faculty(
    session: AsyncSession,
    user_id: str,
    faculty_class: str = "faculty",
    timeout: float = DEFAULT_LOOKUP_TIMEOUT_SECONDS,
) -> bool:
    """Whether the user's affiliation class is `faculty_class`."""
    try:
        found, college_name = await asyncio.wait_for(
            _college_name(session, user_id), timeout=timeout
        )
    except asyncio.TimeoutError as exc:
        log.warning("affiliation.lookup_timeout", user_id=user_id, timeout=timeout)
        await _release(session)
        raise LookupFailed(user_id, LookupFailed.UNAVAILABLE) from exc
    except (SQLAlchemyError, OSError) as exc:
        log.warning("affiliation.lookup_error", user_id=user_id, error=str(exc))
        await _release(session)
        raise LookupFailed(user_id, LookupFailed.UNAVAILABLE) from exc

    if not found:
        raise LookupFailed(user_id, LookupFailed.NOT_FOUND)
    return college_name == faculty_class
