"""
Test configuration and fixtures for catalog-api tests.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from catalog.main import app
from catalog.db.database import get_db
from catalog.db.init_db import create_tables, drop_all_tables
from catalog.dependencies import get_credential_verifier, get_email_sender, get_session_issuer
from catalog.domain.entities import UserRecord, utcnow
from catalog.domain.errors import UpstreamError
from catalog.infrastructure.identity import ChainedCredentialVerifier, JwtSessionIssuer, LocalJwtVerifier

TEST_JWT_SECRET = "test-secret"


class FakeEmailSender:
    """Records messages instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, sender, to, subject, html):
        if self.fail:
            raise UpstreamError("Failed to send email")
        self.sent.append({"from": sender, "to": to, "subject": subject, "html": html})


@pytest.fixture
def engine():
    """In-memory SQLite database shared by every session of a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield engine
    drop_all_tables(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def email_sender():
    return FakeEmailSender()


@pytest.fixture
def session_issuer():
    return JwtSessionIssuer(secret=TEST_JWT_SECRET, ttl_seconds=600)


@pytest.fixture
def client(session_factory, email_sender, session_issuer):
    """Create test client wired to the in-memory database and fake email."""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_session_issuer] = lambda: session_issuer
    app.dependency_overrides[get_credential_verifier] = lambda: ChainedCredentialVerifier(
        [LocalJwtVerifier(secret=TEST_JWT_SECRET)]
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(session_issuer):
    """Build Authorization headers for a user id."""
    def make_headers(user_id="user-1", email=None):
        user = UserRecord(id=user_id, email=email or f"{user_id}@example.com", created_at=utcnow())
        session = session_issuer.issue(user)
        return {"Authorization": f"Bearer {session.access_token}"}
    return make_headers


@pytest.fixture
def car_type_payload():
    return {
        "id": "car",
        "name": "Car",
        "description": "Details about a car",
        "predefinedAttributes": [
            {"name": "make", "type": "string", "required": True},
            {"name": "year", "type": "number", "required": True},
            {"name": "color", "type": "string", "required": False},
            {"name": "automatic", "type": "boolean", "required": False},
        ],
    }
