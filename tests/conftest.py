"""Pytest fixtures for the memoria backend."""

import os

# The app engine is built at import time; keep it off any developer Postgres.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from collections.abc import Callable, Iterator
from typing import Any, Dict, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from memoria.core.email import EmailSender, get_email_sender
from memoria.core.security import create_access_token, get_password_hash
from memoria.db.base import Base
from memoria.db.session import get_db
from memoria.main import app
from memoria.modules.realtime.hub import NotificationHub, get_notification_hub
from memoria.modules.user_management.models.user import User

TEST_PASSWORD = "correct-horse-42"


class RecordingHub(NotificationHub):
    """Notification hub that remembers every publish call."""

    def __init__(self) -> None:
        super().__init__()
        self.published: List[Tuple[str, str, Any]] = []

    async def publish(self, user_id: str, event: str, payload: Any) -> int:
        self.published.append((user_id, event, payload))
        return await super().publish(user_id, event, payload)

    def events_for(self, user_id: str, event: str) -> List[Any]:
        return [payload for uid, name, payload in self.published if uid == user_id and name == event]


class FakeWebSocket:
    """Stands in for a live connection registered directly on a hub."""

    def __init__(self) -> None:
        self.accepted = False
        self.sent: List[Dict[str, Any]] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data: Dict[str, Any]) -> None:
        self.sent.append(data)


class FailingWebSocket(FakeWebSocket):
    async def send_json(self, data):
        raise RuntimeError("connection reset")


class CapturingEmailSender(EmailSender):
    def __init__(self) -> None:
        self.codes: Dict[str, str] = {}

    def send_verification_code(self, email: str, code: str) -> None:
        self.codes[email] = code


@pytest.fixture(scope="session")
def test_engine():
    """Single in-memory SQLite database shared by every session in the run."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="session")
def session_factory(test_engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def clean_database(session_factory) -> Iterator[None]:
    """Clear tables before each test to guarantee isolation."""
    session = session_factory()
    try:
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
    finally:
        session.close()
    yield


@pytest.fixture()
def db_session(session_factory) -> Iterator[Session]:
    """Provide a raw database session to tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def hub() -> RecordingHub:
    return RecordingHub()


@pytest.fixture()
def email_sender() -> CapturingEmailSender:
    return CapturingEmailSender()


@pytest.fixture()
def client(session_factory, hub, email_sender) -> Iterator[TestClient]:
    """TestClient wired to the test database, a recording hub and a capturing email sender."""

    def override_get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_hub] = lambda: hub
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash() -> str:
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture()
def make_user(db_session, password_hash) -> Callable[..., User]:
    """Insert an active user directly, skipping the email verification round trip."""

    def _make_user(username: str, is_private: bool = False, **fields: Any) -> User:
        user = User(
            email=f"{username}@memoria.dev",
            username=username,
            hashed_password=password_hash,
            first_name=fields.pop("first_name", username.capitalize()),
            last_name=fields.pop("last_name", "Tester"),
            is_private=is_private,
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}
