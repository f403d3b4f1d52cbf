"""
Task Manager API - Task CRUD Tests

CI-safe tests for owner-scoped task management without MongoDB.
"""

import asyncio
from datetime import datetime


def _create(client, headers, description="Task", **fields):
    response = client.post("/tasks", json={"description": description, **fields}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTask:
    """Tests for POST /tasks."""

    def test_create_task_minimal(self, client, auth_headers):
        response = client.post("/tasks", json={"description": "From my test"}, headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["description"] == "From my test"
        assert data["completed"] is False
        assert "id" in data
        assert "created_at" in data
        assert "updated_at" in data

    def test_create_task_is_persisted(self, client, auth_headers, task_repository):
        data = _create(client, auth_headers, "Persist me", completed=True)
        task = asyncio.run(task_repository.get_by_id(data["id"], data["owner_id"]))
        assert task is not None
        assert task.completed is True
        assert task.description == "Persist me"

    def test_owner_comes_from_token(self, client, auth_headers):
        me = client.get("/users/me", headers=auth_headers).json()
        data = _create(client, auth_headers, "Mine", owner_id="someone-else", owner="someone-else")
        assert data["owner_id"] == me["id"]

    def test_description_is_trimmed(self, client, auth_headers):
        data = _create(client, auth_headers, "  padded  ")
        assert data["description"] == "padded"

    def test_create_task_empty_description(self, client, auth_headers):
        for description in ("", "   "):
            response = client.post("/tasks", json={"description": description}, headers=auth_headers)
            assert response.status_code == 400

    def test_create_task_missing_description(self, client, auth_headers):
        response = client.post("/tasks", json={"completed": True}, headers=auth_headers)
        assert response.status_code == 400

    def test_completed_must_be_boolean(self, client, auth_headers):
        """String flags are not coerced."""
        for completed in ("no", "true", "false", 1, None):
            response = client.post(
                "/tasks",
                json={"description": "Flag", "completed": completed},
                headers=auth_headers,
            )
            assert response.status_code == 400

    def test_create_task_requires_auth(self, client):
        response = client.post("/tasks", json={"description": "Unauthorized"})
        assert response.status_code == 401


class TestGetTask:
    """Tests for GET /tasks/{task_id}."""

    def test_get_task_success(self, client, auth_headers):
        created = _create(client, auth_headers, "Retrievable Task")

        response = client.get(f"/tasks/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == created

    def test_get_task_not_found(self, client, auth_headers):
        response = client.get("/tasks/nonexistent-id", headers=auth_headers)
        assert response.status_code == 404

    def test_other_users_task_looks_missing(self, client, auth_headers, second_auth_headers):
        """B cannot tell A's task apart from one that does not exist."""
        task = _create(client, auth_headers, "A's task")

        foreign = client.get(f"/tasks/{task['id']}", headers=second_auth_headers)
        missing = client.get("/tasks/does-not-exist", headers=second_auth_headers)
        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()

        own = client.get(f"/tasks/{task['id']}", headers=auth_headers)
        assert own.status_code == 200
        assert own.json()["description"] == "A's task"

    def test_get_task_requires_auth(self, client, auth_headers):
        task = _create(client, auth_headers)
        response = client.get(f"/tasks/{task['id']}")
        assert response.status_code == 401


class TestUpdateTask:
    """Tests for PATCH /tasks/{task_id}."""

    def test_update_fields(self, client, auth_headers):
        task = _create(client, auth_headers, "Before")

        response = client.patch(
            f"/tasks/{task['id']}",
            json={"description": "After", "completed": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["description"] == "After"
        assert data["completed"] is True
        assert data["created_at"] == task["created_at"]
        assert datetime.fromisoformat(data["updated_at"]) >= datetime.fromisoformat(task["updated_at"])

    def test_update_single_field(self, client, auth_headers):
        task = _create(client, auth_headers, "Keep me")
        response = client.patch(f"/tasks/{task['id']}", json={"completed": True}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["description"] == "Keep me"

    def test_empty_update_returns_task(self, client, auth_headers):
        task = _create(client, auth_headers, "Untouched")
        response = client.patch(f"/tasks/{task['id']}", json={}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["description"] == "Untouched"

    def test_disallowed_field_rejects_whole_update(self, client, auth_headers):
        task = _create(client, auth_headers, "Original")

        response = client.patch(
            f"/tasks/{task['id']}",
            json={"description": "Changed", "owner_id": "someone-else"},
            headers=auth_headers,
        )
        assert response.status_code == 400

        current = client.get(f"/tasks/{task['id']}", headers=auth_headers).json()
        assert current == task

    def test_invalid_values_rejected(self, client, auth_headers):
        task = _create(client, auth_headers, "Original")
        for body in (
            {"description": ""},
            {"description": None},
            {"completed": "no"},
            {"completed": "true"},
            {"completed": None},
        ):
            response = client.patch(f"/tasks/{task['id']}", json=body, headers=auth_headers)
            assert response.status_code == 400, body

        assert client.get(f"/tasks/{task['id']}", headers=auth_headers).json() == task

    def test_invalid_body_checked_before_lookup(self, client, auth_headers):
        response = client.patch(
            "/tasks/not-a-real-id",
            json={"description": "", "completed": "no"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_update_other_users_task(self, client, auth_headers, second_auth_headers):
        task = _create(client, second_auth_headers, "Theirs")

        response = client.patch(
            f"/tasks/{task['id']}",
            json={"description": "Updated description", "completed": False},
            headers=auth_headers,
        )
        assert response.status_code == 404

        unchanged = client.get(f"/tasks/{task['id']}", headers=second_auth_headers).json()
        assert unchanged == task

    def test_update_missing_task(self, client, auth_headers):
        response = client.patch("/tasks/missing", json={"completed": True}, headers=auth_headers)
        assert response.status_code == 404

    def test_update_requires_auth(self, client, auth_headers):
        task = _create(client, auth_headers)
        response = client.patch(f"/tasks/{task['id']}", json={"description": "Hacked"})
        assert response.status_code == 401


class TestDeleteTask:
    """Tests for DELETE /tasks/{task_id}."""

    def test_delete_own_task(self, client, auth_headers):
        task = _create(client, auth_headers, "Doomed")

        response = client.delete(f"/tasks/{task['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == task["id"]

        assert client.get(f"/tasks/{task['id']}", headers=auth_headers).status_code == 404

    def test_delete_other_users_task(self, client, auth_headers, second_auth_headers):
        task = _create(client, auth_headers, "Safe")

        response = client.delete(f"/tasks/{task['id']}", headers=second_auth_headers)
        assert response.status_code == 404

        assert client.get(f"/tasks/{task['id']}", headers=auth_headers).status_code == 200

    def test_delete_missing_task(self, client, auth_headers):
        assert client.delete("/tasks/missing", headers=auth_headers).status_code == 404

    def test_delete_requires_auth(self, client, auth_headers):
        task = _create(client, auth_headers)
        assert client.delete(f"/tasks/{task['id']}").status_code == 401
        assert client.get(f"/tasks/{task['id']}", headers=auth_headers).status_code == 200
