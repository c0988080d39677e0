from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from church_portal_api.app.core.storage import MemStorage
from church_portal_api.app.main import create_app


API = "/api"


def register(client, username, password="secret123", name=None, email=None):
    """Register a user through the API and return ``(user, auth_headers)``."""
    response = client.post(
        f"{API}/register",
        json={
            "username": username,
            "password": password,
            "name": name or username.title(),
            "email": email or f"{username}@example.com",
        },
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user"], {"Authorization": f"Bearer {body['accessToken']}"}


def iso(delta: timedelta) -> str:
    return (datetime.now(timezone.utc) + delta).isoformat()


def event_body(**overrides):
    body = {
        "title": "Service",
        "description": "Sunday worship",
        "eventType": "service",
        "startTime": iso(timedelta(days=1)),
        "endTime": iso(timedelta(days=1, hours=1)),
        "location": "Hall",
    }
    body.update(overrides)
    return body


@pytest.fixture
def storage():
    return MemStorage()


@pytest.fixture
def app(storage):
    return create_app(storage)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin(client):
    # The first registered account becomes the administrator.
    return register(client, "admin")


@pytest.fixture
def member(client, admin):
    return register(client, "member")


@pytest.fixture
def other_member(client, admin):
    return register(client, "other")
