"""
Task Manager API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB or an SMTP server.
"""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from task_manager.main import app
from task_manager.database import get_database
from task_manager.emails.notifications import get_notifier
from task_manager.tasks.dependencies import get_task_repository
from task_manager.tasks.repository import InMemoryTaskRepository
from task_manager.users.dependencies import get_user_repository
from task_manager.users.repository import InMemoryUserRepository


# Global in-memory repositories for tests
_test_task_repository = InMemoryTaskRepository()
_test_user_repository = InMemoryUserRepository()


class RecordingNotifier:
    """Stands in for the dispatcher and remembers every notification."""

    def __init__(self):
        self.welcome: list[tuple[str, str]] = []
        self.cancellation: list[tuple[str, str]] = []

    def notify_welcome(self, email: str, name: str) -> None:
        self.welcome.append((email, name))

    def notify_cancellation(self, email: str, name: str) -> None:
        self.cancellation.append((email, name))


async def override_get_task_repository():
    """Override dependency to use in-memory task repository."""
    return _test_task_repository


async def override_get_user_repository():
    """Override dependency to use in-memory user repository."""
    return _test_user_repository


async def override_get_database():
    """Override database dependency (repositories are replaced, so nothing uses it)."""
    return MagicMock()


@pytest.fixture
def task_repository():
    """Provide a fresh in-memory task repository for each test."""
    _test_task_repository.clear()
    return _test_task_repository


@pytest.fixture
def user_repository():
    """Provide a fresh in-memory user repository for each test."""
    _test_user_repository.clear()
    return _test_user_repository


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(task_repository, user_repository, notifier):
    """Create test client with in-memory repositories and a recording notifier."""
    app.dependency_overrides[get_task_repository] = override_get_task_repository
    app.dependency_overrides[get_user_repository] = override_get_user_repository
    app.dependency_overrides[get_database] = override_get_database
    app.dependency_overrides[get_notifier] = lambda: notifier

    yield TestClient(app)
    # Clean up override after test
    app.dependency_overrides.clear()


@pytest.fixture
def user_one():
    return {"name": "Mike", "email": "mike@example.com", "password": "56what!!"}


@pytest.fixture
def user_two():
    return {"name": "Jess", "email": "jess@example.com", "password": "myhouse099@@"}


@pytest.fixture
def signup(client):
    """Sign a user up and return the response body ({user, token})."""

    def _signup(credentials: dict) -> dict:
        response = client.post("/users", json=credentials)
        assert response.status_code == 201, response.text
        return response.json()

    return _signup


@pytest.fixture
def auth_token(signup, user_one):
    """Token of user one, issued at signup."""
    return signup(user_one)["token"]


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_auth_headers(signup, user_two):
    """Authorization headers for the second user."""
    token = signup(user_two)["token"]
    return {"Authorization": f"Bearer {token}"}
