"""Shared pytest fixtures and configuration."""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from mediator_api.config import AUTH_SECRET, JWT_ALGORITHM
from mediator_api.db.config import build_engine, get_session
from mediator_api.db.init import init_db
from mediator_api.dependencies import get_broadcaster, get_mediation_client
from mediator_api.errors import MediationServiceError
from mediator_api.main import app
from mediator_api.mediation.client import MediationClient, MediationResponse
from mediator_api.utils.metrics import metrics_collector

WELCOME_TEXT = "Welcome. What would you like to talk about?"


class FakeMediationClient(MediationClient):
    """Mediator that replays queued responses and records every call."""

    def __init__(self):
        self.responses: List[MediationResponse] = []
        self.calls = []
        self.welcome_calls = []
        self.fail_with: Optional[Exception] = None

    def queue(self, message: str = "I hear you.", next_stage: Optional[str] = None, safety_alert=None):
        self.responses.append(MediationResponse(message=message, next_stage=next_stage, safety_alert=safety_alert))

    async def generate_response(self, history, current_stage, new_message, personality, session_mode="solo"):
        self.calls.append(
            {
                "history": list(history),
                "current_stage": current_stage,
                "new_message": new_message,
                "personality": personality,
                "session_mode": session_mode,
            }
        )
        if self.fail_with is not None:
            raise self.fail_with
        if self.responses:
            return self.responses.pop(0)
        return MediationResponse(message="I hear you.")

    async def generate_welcome(self, personality, session_mode="solo", topic_context=None):
        self.welcome_calls.append({"session_mode": session_mode, "topic_context": topic_context})
        return WELCOME_TEXT


class FakeBroadcaster:
    """Records published events instead of sending them."""

    def __init__(self):
        self.events = []

    def publish_new_message(self, session_id, message):
        self.events.append(("new-message", session_id, message))
        return True

    def publish_typing(self, session_id, user_id, user_name, is_typing):
        event = "typing-start" if is_typing else "typing-stop"
        self.events.append((event, session_id, {"userId": user_id, "userName": user_name}))
        return True

    def publish_session_updated(self, session_id, stage, status):
        self.events.append(("session-updated", session_id, {"stage": stage, "status": status}))
        return True

    def publish_user_joined(self, session_id, user_id, display_name):
        self.events.append(("user-joined", session_id, {"userId": user_id, "displayName": display_name}))
        return True

    def of_type(self, event_type):
        return [event for event in self.events if event[0] == event_type]


@pytest.fixture
def engine():
    """In-memory SQLite shared across connections for one test."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics_collector.reset()
    yield


@pytest.fixture
def mediator():
    return FakeMediationClient()


@pytest.fixture
def broadcaster():
    return FakeBroadcaster()


@pytest.fixture
def failing_mediator(mediator):
    mediator.fail_with = MediationServiceError("model unavailable")
    return mediator


def make_token(user_id: str, name: Optional[str] = None, expires_in: timedelta = timedelta(hours=1)) -> str:
    payload = {
        "sub": user_id,
        "email": f"{user_id}@example.com",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if name:
        payload["name"] = name
    return jwt.encode(payload, AUTH_SECRET, algorithm=JWT_ALGORITHM)


def auth_headers(user_id: str, name: Optional[str] = None) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id, name)}"}


@pytest.fixture
def client(engine, mediator, broadcaster):
    """TestClient wired to the in-memory database and fake collaborators."""

    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_mediation_client] = lambda: mediator
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster

    yield TestClient(app)

    app.dependency_overrides.clear()
