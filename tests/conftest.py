import uuid

import mongomock
import pytest
from fastapi.testclient import TestClient

from socialconnect.config import Settings
from socialconnect.database import ensure_indexes
from socialconnect.errors import ServiceUnavailable
from socialconnect.main import create_app


class RecordingMailer:
    """
    Stands in for Mailer in route tests. Keeps the plain reset tokens so a
    test can follow the link the way a user would.
    """

    def __init__(self):
        self.reset_emails = []
        self.confirmations = []
        self.fail_reset = False
        self.fail_confirmation = False

    async def send_password_reset(self, email: str, token: str, first_name: str) -> None:
        if self.fail_reset:
            raise ServiceUnavailable("Failed to send reset email. Please try again later.")
        self.reset_emails.append({"email": email, "token": token, "first_name": first_name})

    async def send_reset_confirmation(self, email: str, first_name: str) -> bool:
        if self.fail_confirmation:
            return False
        self.confirmations.append({"email": email, "first_name": first_name})
        return True


@pytest.fixture
def settings():
    return Settings(JWT_SECRET="test-secret", MAIL_SUPPRESS_SEND=True, LOG_LEVEL="WARNING")


@pytest.fixture
def db():
    """Fresh in-memory database for every test."""
    database = mongomock.MongoClient()[f"socialconnect_test_{uuid.uuid4().hex[:6]}"]
    ensure_indexes(database)
    return database


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def app(settings, db, mailer):
    return create_app(settings, db=db, mailer=mailer)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    """
    Factory fixture: register a user through the API and return
    ``(user, headers)`` ready for authenticated calls.
    """

    def _register(username: str = None, password: str = "pw123456", **extra):
        username = username or f"user_{uuid.uuid4().hex[:6]}"
        body = {
            "username": username,
            "email": extra.get("email", f"{username}@mail.com"),
            "password": password,
            "firstName": extra.get("firstName", username.capitalize()),
            "lastName": extra.get("lastName", "Tester"),
        }
        resp = client.post("/api/auth/register", json=body)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register


@pytest.fixture
def make_post(client):
    def _make_post(headers: dict, title: str = "Hello", content: str = "World", **extra):
        resp = client.post("/api/posts", json={"title": title, "content": content, **extra}, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make_post
