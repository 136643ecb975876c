"""
Shared fixtures: a throwaway SQLite database per test, seeded users and
events, a fixed registration policy and a recording topic subscriber.
"""

import os
import tempfile

# Must be set before app.core.database builds its module-level engine.
os.environ.setdefault(
    "HABBA_DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'habba-test-ready.db')}",
)
os.environ.setdefault("HABBA_LOG_FORMAT", "text")

import pytest
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.config import RegistrationPolicy
from app.core.database import build_engine, build_session_factory
from app.models.event import Event
from app.models.user import User
from app.services.notifications import SubscriptionResult

FACULTY_ONLY_EVENT = "13"
RESTRICTED_EVENT = "14"
OPEN_EVENT = "50"
MISSING_EVENT = "999"


class RecordingSubscriber:
    """TopicSubscriber double that remembers every call."""

    def __init__(self, fail: bool = False, explode: bool = False):
        self.calls: list[tuple[str, str]] = []
        self.fail = fail
        self.explode = explode

    async def subscribe(self, device_id: str, topic: str) -> SubscriptionResult:
        self.calls.append((device_id, topic))
        if self.explode:
            raise RuntimeError("subscriber blew up")
        if self.fail:
            return SubscriptionResult(device_id=device_id, topic=topic, ok=False, error="UNAVAILABLE")
        return SubscriptionResult(device_id=device_id, topic=topic, ok=True)


@pytest.fixture
def policy() -> RegistrationPolicy:
    return RegistrationPolicy(
        faculty_only_events=frozenset({FACULTY_ONLY_EVENT}),
        restricted_affiliation_events=frozenset({RESTRICTED_EVENT, "15", "16"}),
        privileged_prefix="ay",
    )


@pytest.fixture
def subscriber() -> RecordingSubscriber:
    return RecordingSubscriber()


@pytest.fixture
async def engine(tmp_path):
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'habba.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def seeded(session_factory):
    async with session_factory() as s:
        s.add_all([
            User(user_id="ay-101", name="Asha", college_name="faculty"),
            User(user_id="ay-303", name="Ravi", college_name="Acharya Institute of Technology"),
            User(user_id="ay-404", name="Meera", college_name="Acharya Institute of Technology"),
            User(user_id="bd-202", name="Kiran", college_name="faculty"),
            User(user_id="guest", name="No Prefix", college_name="faculty"),
        ])
        s.add_all([
            Event(event_id=FACULTY_ONLY_EVENT, name="Faculty Quiz"),
            Event(event_id=RESTRICTED_EVENT, name="Inter-department Cricket"),
            Event(event_id=OPEN_EVENT, name="Battle of Bands"),
        ])
        await s.commit()


@pytest.fixture
async def session(session_factory, seeded):
    async with session_factory() as s:
        yield s
