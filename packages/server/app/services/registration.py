"""
Event registration: eligibility, enrollment and topic subscription.

    prefix -> tier -> (prefix rule) -> (faculty lookup) -> enroll -> subscribe

Every outcome is returned as a RegistrationResult; collaborator exceptions
stop here. The enrollment commit happens before the subscription call, and a
failed subscription never undoes it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import RegistrationPolicy
from app.models.base import utcnow
from app.models.enrollment import EventRegistration
from app.services import affiliation, eligibility, enrollments
from app.services.notifications import SubscriptionResult, TopicSubscriber
from habba_shared.schemas.common import IneligibleReason, RegistrationErrorCode, Tier

log = structlog.get_logger()

_STORE_ERROR_CODES: dict[type, RegistrationErrorCode] = {
    enrollments.DuplicateEnrollment: RegistrationErrorCode.ALREADY_REGISTERED,
    enrollments.UnknownReference: RegistrationErrorCode.UNKNOWN_REFERENCE,
    enrollments.StoreUnavailable: RegistrationErrorCode.STORE_UNAVAILABLE,
}

_LOOKUP_ERROR_CODES: dict[str, RegistrationErrorCode] = {
    affiliation.LookupFailed.NOT_FOUND: RegistrationErrorCode.UNKNOWN_REFERENCE,
    affiliation.LookupFailed.UNAVAILABLE: RegistrationErrorCode.STORE_UNAVAILABLE,
}


@dataclass(frozen=True)
class RegistrationResult:
    user_id: str
    event_id: str
    tier: Tier
    error: Optional[RegistrationErrorCode] = None
    reason: Optional[IneligibleReason] = None
    enrollment: Optional[EventRegistration] = None
    subscription: Optional[SubscriptionResult] = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _subscribe_quietly(
    subscriber: TopicSubscriber, device_id: str, topic: str
) -> SubscriptionResult:
    try:
        return await subscriber.subscribe(device_id, topic)
    except Exception as exc:  # collaborator faults never escape
        log.warning("subscription.crashed", device_id=device_id, topic=topic, error=repr(exc))
        return SubscriptionResult(device_id=device_id, topic=topic, ok=False, error=repr(exc))


async def register_for_event(
    session: AsyncSession,
    user_id: str,
    event_id: str,
    device_id: str,
    *,
    policy: RegistrationPolicy,
    subscriber: TopicSubscriber,
    lookup_timeout: float = affiliation.DEFAULT_LOOKUP_TIMEOUT_SECONDS,
) -> RegistrationResult:
    """Register `user_id` for `event_id` and subscribe `device_id` to its topic."""
    bound = log.bind(user_id=user_id, event_id=event_id)

    prefix = affiliation.resolve_affiliation_prefix(user_id)
    tier = eligibility.classify(event_id, policy)

    def failed(error: RegistrationErrorCode, reason: Optional[IneligibleReason] = None):
        return RegistrationResult(
            user_id=user_id, event_id=event_id, tier=tier, error=error, reason=reason
        )

    verdict = eligibility.evaluate(tier, prefix, policy)
    if verdict.allowed and eligibility.TIER_REQUIREMENTS[tier].faculty:
        try:
            faculty = await affiliation.is_faculty(
                session, user_id, faculty_class=policy.faculty_class, timeout=lookup_timeout
            )
        except affiliation.LookupFailed as exc:
            bound.info("registration.lookup_failed", reason=exc.reason)
            return failed(_LOOKUP_ERROR_CODES[exc.reason])
        except Exception:
            bound.exception("registration.lookup_crashed")
            return failed(RegistrationErrorCode.STORE_UNAVAILABLE)
        verdict = eligibility.evaluate(tier, prefix, policy, is_faculty=faculty)

    if not verdict.allowed:
        bound.info("registration.ineligible", tier=tier.value, reason=verdict.reason.value)
        return failed(RegistrationErrorCode.INELIGIBLE, verdict.reason)

    try:
        enrollment = await enrollments.enroll(
            session, user_id, event_id, payment_made=False, registered_at=utcnow()
        )
    except enrollments.EnrollmentError as exc:
        return failed(_STORE_ERROR_CODES.get(type(exc), RegistrationErrorCode.STORE_UNAVAILABLE))
    except Exception:
        bound.exception("registration.store_crashed")
        return failed(RegistrationErrorCode.STORE_UNAVAILABLE)

    subscription = await _subscribe_quietly(subscriber, device_id, event_id)
    bound.info(
        "registration.completed",
        tier=tier.value,
        subscribed=subscription.ok,
    )
    return RegistrationResult(
        user_id=user_id,
        event_id=event_id,
        tier=tier,
        enrollment=enrollment,
        subscription=subscription,
    )
