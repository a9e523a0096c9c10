"""Shared pytest fixtures for the DeviceWatch API tests.

Provides database fixtures, test users and devices, token helpers and a
FastAPI test client wired to the test database.
"""

import os

# CRITICAL: Set configuration BEFORE any other imports that might use config
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["OIDC_SIGNING_KEY"] = "test-oidc-signing-key"
os.environ["OIDC_CLIENT_ID"] = "devicewatch-test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = os.environ.get("TEST_DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401
from database import Base, enable_sqlite_foreign_keys, get_db
from models.device import Device
from models.user import User
from services.command_dispatcher import CommandDispatcher, get_command_dispatcher


TEST_SECRET_KEY = "test-secret-key"
TEST_OIDC_SIGNING_KEY = "test-oidc-signing-key"
TEST_OIDC_CLIENT_ID = "devicewatch-test"


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def test_database_url() -> str:
    """Get test database URL from environment or use in-memory SQLite.

    Point TEST_DATABASE_URL at a dedicated database to run against Postgres.
    """
    return os.environ.get("TEST_DATABASE_URL", "sqlite://")


@pytest.fixture(scope="session")
def test_engine(test_database_url: str):
    """Create SQLAlchemy engine for test database."""
    if test_database_url.startswith("sqlite"):
        # One shared connection so the in-memory database survives across sessions/threads
        engine = create_engine(
            test_database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(test_database_url)
    enable_sqlite_foreign_keys(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    """Session factory over a freshly created schema.

    Tables are created for each test and dropped afterwards, so sessions
    opened outside the request (e.g. by command timers) see committed data.
    """
    Base.metadata.create_all(bind=test_engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a database session for a single test."""
    session = session_factory()

    yield session

    session.close()


# ============================================================================
# User & Device Fixtures
# ============================================================================

@pytest.fixture
def test_user(db_session: Session) -> User:
    """Create a test user as if signed in through the identity provider."""
    user = User(
        id="user-1",
        email="test@example.com",
        first_name="Test",
        last_name="User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user2(db_session: Session) -> User:
    """Create a second test user for multi-user tests."""
    user = User(
        id="user-2",
        email="other@example.com",
        first_name="Other",
        last_name="User",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_device(db_session: Session, test_user: User) -> Device:
    """Create a test device linked to test_user."""
    device = Device(
        user_id=test_user.id,
        name="Test Phone",
        description="Primary phone",
        device_type="smartphone",
        platform="Android",
        battery=80,
    )
    db_session.add(device)
    db_session.commit()
    db_session.refresh(device)
    return device


@pytest.fixture
def other_device(db_session: Session, test_user2: User) -> Device:
    """Create a device owned by test_user2."""
    device = Device(
        user_id=test_user2.id,
        name="Other Tablet",
        device_type="tablet",
        platform="iOS",
    )
    db_session.add(device)
    db_session.commit()
    db_session.refresh(device)
    return device


# ============================================================================
# Authentication Fixtures
# ============================================================================

@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Authorization headers carrying a session token for test_user."""
    return auth_headers_for(test_user.id)


@pytest.fixture
def other_auth_headers(test_user2: User) -> dict:
    """Authorization headers carrying a session token for test_user2."""
    return auth_headers_for(test_user2.id)


# ============================================================================
# FastAPI Test Client
# ============================================================================

class RecordingDispatcher(CommandDispatcher):
    """Dispatcher that only remembers which commands it was handed."""

    def __init__(self):
        self.dispatched: list[int] = []

    def dispatch(self, command) -> None:
        self.dispatched.append(command.id)


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def client(db_session: Session, dispatcher: CommandDispatcher) -> TestClient:
    """Create FastAPI test client with overridden database and dispatcher dependencies."""
    # Import app here to avoid loading it for unit tests
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_command_dispatcher] = lambda: dispatcher

    with TestClient(app) as test_client:
        yield test_client

    # Clean up
    app.dependency_overrides.clear()


# ============================================================================
# Helper Functions
# ============================================================================

def create_session_token(
    user_id: str,
    *,
    token_type: str = "session",
    expires_delta: timedelta = timedelta(hours=1),
    secret_key: str = TEST_SECRET_KEY,
) -> str:
    """Helper to create session tokens for authenticated requests."""
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": token_type,
    }
    return jwt.encode(payload, secret_key, algorithm="HS256")


def auth_headers_for(user_id: str, **kwargs) -> dict:
    return {"Authorization": f"Bearer {create_session_token(user_id, **kwargs)}"}


def create_identity_token(
    sub: Optional[str],
    *,
    audience: str = TEST_OIDC_CLIENT_ID,
    expires_delta: timedelta = timedelta(minutes=5),
    signing_key: str = TEST_OIDC_SIGNING_KEY,
    **claims,
) -> str:
    """Helper to mint an ID token as the identity provider would."""
    payload = {
        "aud": audience,
        "exp": datetime.now(timezone.utc) + expires_delta,
        **claims,
    }
    if sub is not None:
        payload["sub"] = sub
    return jwt.encode(payload, signing_key, algorithm="HS256")
