"""
Push-notification topic subscriptions (Firebase Cloud Messaging).

Subscribing a device to a topic is advisory: callers get a result value and
decide whether to care. Nothing here raises to the caller.

Topic management goes through the Instance ID API:
    POST {iid_url}:batchAdd  {"to": "/topics/<topic>", "registration_tokens": [...]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import httpx
import structlog

from habba_shared.schemas.common import BROADCAST_TOPIC

log = structlog.get_logger()

DEFAULT_IID_URL = "https://iid.googleapis.com/iid/v1"
DEFAULT_TIMEOUT_SECONDS = 5.0


class SubscriptionFailed(Exception):
    """A device could not be subscribed to a topic."""


@dataclass(frozen=True)
class SubscriptionResult:
    device_id: str
    topic: str
    ok: bool
    error: Optional[str] = None


class TopicSubscriber(Protocol):
    async def subscribe(self, device_id: str, topic: str) -> SubscriptionResult: ...


class FcmTopicSubscriber:
    """
    Subscribes devices to FCM topics over HTTP.

    One shared httpx client per process; call `open()` at startup and
    `close()` at shutdown. Every request is bounded by `timeout`.
    """

    def __init__(
        self,
        access_token: str,
        iid_url: str = DEFAULT_IID_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._access_token = access_token
        self._iid_url = iid_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def open(self) -> None:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            transport=self._transport,
        )

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _batch_add(self, device_id: str, topic: str) -> None:
        if not self._access_token:
            raise SubscriptionFailed("FCM credentials are not configured")
        if self._client is None:
            raise SubscriptionFailed("Subscriber is not open")

        try:
            resp = await self._client.post(
                f"{self._iid_url}:batchAdd",
                headers={
                    "Authorization": f"Bearer {self._access_token}",
                    "access_token_auth": "true",
                },
                json={"to": f"/topics/{topic}", "registration_tokens": [device_id]},
            )
        except httpx.HTTPError as exc:
            raise SubscriptionFailed(f"{exc.__class__.__name__}: {exc}") from exc

        if resp.status_code != 200:
            raise SubscriptionFailed(f"FCM returned HTTP {resp.status_code}")

        try:
            results = resp.json().get("results") or [{}]
        except ValueError as exc:
            raise SubscriptionFailed("FCM returned a malformed body") from exc

        error = results[0].get("error")
        if error:
            raise SubscriptionFailed(error)

    async def subscribe(self, device_id: str, topic: str) -> SubscriptionResult:
        try:
            await self._batch_add(device_id, topic)
        except SubscriptionFailed as exc:
            log.warning("subscription.failed", device_id=device_id, topic=topic, error=str(exc))
            return SubscriptionResult(device_id=device_id, topic=topic, ok=False, error=str(exc))

        log.info("subscription.added", device_id=device_id, topic=topic)
        return SubscriptionResult(device_id=device_id, topic=topic, ok=True)


async def subscribe_to_broadcast(
    subscriber: TopicSubscriber, device_id: str
) -> SubscriptionResult:
    """Subscribe a device to the festival-wide topic."""
    return await subscriber.subscribe(device_id, BROADCAST_TOPIC)
