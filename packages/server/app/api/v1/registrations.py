"""
Event registration endpoints.

POST /api/v1/events/user/register       Register the calling user for an event
GET  /api/v1/events/user/registrations  List the calling user's registrations
POST /api/v1/events/subscriptions/all   Subscribe a device to the broadcast topic
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import RegistrationPolicy, get_registration_policy, get_settings
from app.core.database import get_session
from app.services import enrollments as enrollment_service
from app.services.notifications import TopicSubscriber, subscribe_to_broadcast
from app.services.registration import RegistrationResult, register_for_event
from habba_shared.schemas.common import ErrorDetail, RegistrationErrorCode
from habba_shared.schemas.registrations import (
    EnrollmentListResponse,
    EnrollmentResponse,
    RegistrationRequest,
    RegistrationResponse,
    TopicSubscriptionRequest,
    TopicSubscriptionResponse,
)

router = APIRouter()

_ERROR_STATUS = {
    RegistrationErrorCode.INELIGIBLE: (403, "You are not eligible for this event"),
    RegistrationErrorCode.ALREADY_REGISTERED: (409, "Already registered for this event"),
    RegistrationErrorCode.UNKNOWN_REFERENCE: (404, "Unknown user or event"),
    RegistrationErrorCode.STORE_UNAVAILABLE: (503, "Registration could not be saved"),
}


def get_topic_subscriber(request: Request) -> TopicSubscriber:
    """FastAPI dependency: the process-wide subscriber created at startup."""
    return request.app.state.topic_subscriber


def _raise_for_result(result: RegistrationResult) -> None:
    status_code, message = _ERROR_STATUS[result.error]
    detail = ErrorDetail(
        code=result.error.value,
        message=message,
        reason=result.reason.value if result.reason is not None else None,
    )
    raise HTTPException(status_code=status_code, detail=detail.model_dump(exclude_none=True))


@router.post(
    "/user/register",
    response_model=RegistrationResponse,
    status_code=201,
    responses={status: {"model": ErrorDetail} for status, _ in _ERROR_STATUS.values()},
)
async def register(
    body: RegistrationRequest,
    user_id: str = Header(..., convert_underscores=False, min_length=1),
    session: AsyncSession = Depends(get_session),
    policy: RegistrationPolicy = Depends(get_registration_policy),
    subscriber: TopicSubscriber = Depends(get_topic_subscriber),
):
    """Register a user for an event and subscribe their device to its notifications."""
    result = await register_for_event(
        session,
        user_id,
        body.event_id,
        body.device_id,
        policy=policy,
        subscriber=subscriber,
        lookup_timeout=get_settings().lookup_timeout_seconds,
    )
    if not result.ok:
        _raise_for_result(result)

    enrollment = result.enrollment
    return RegistrationResponse(
        enrollment=EnrollmentResponse(
            user_id=enrollment.user_id,
            event_id=enrollment.event_id,
            payment_made=enrollment.payment_made,
            registration_time=enrollment.registration_time,
        ),
        tier=result.tier,
        subscribed=bool(result.subscription and result.subscription.ok),
    )


@router.get("/user/registrations", response_model=EnrollmentListResponse)
async def list_registrations(
    user_id: str = Header(..., convert_underscores=False, min_length=1),
    session: AsyncSession = Depends(get_session),
):
    """List every event the user is registered for."""
    items = await enrollment_service.list_user_enrollments(session, user_id)
    return EnrollmentListResponse(data=[EnrollmentResponse(**item) for item in items])


@router.post(
    "/subscriptions/all",
    response_model=TopicSubscriptionResponse,
    responses={502: {"model": ErrorDetail}},
)
async def subscribe_all(
    body: TopicSubscriptionRequest,
    subscriber: TopicSubscriber = Depends(get_topic_subscriber),
):
    """Subscribe a device to festival-wide announcements."""
    result = await subscribe_to_broadcast(subscriber, body.device_id)
    if not result.ok:
        raise HTTPException(
            status_code=502,
            detail=ErrorDetail(
                code="NOTIFICATION_FAILED", message="Could not subscribe device"
            ).model_dump(exclude_none=True),
        )
    return TopicSubscriptionResponse(topic=result.topic, subscribed=True)
