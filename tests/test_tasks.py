# =============================================================================
# tests/test_tasks.py - Task Endpoint Tests
# =============================================================================
# Also covers behaviour shared by every list endpoint (pagination, limit
# clamping) and the activity log side effects.
# =============================================================================

from unittest import mock

from tests.conftest import auth_headers, make_user


def create_task(client, headers, **fields):
    body = {"title": "Call supplier", **fields}
    response = client.post("/api/tasks", headers=headers, json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestTaskCrud:
    """Tests for task create, read, update and delete."""

    def test_create_defaults(self, client, user, user_headers):
        task = create_task(client, user_headers)

        assert task["status"] == "pending"
        assert task["priority"] == "medium"
        assert task["assignedTo"] == user["id"]
        assert task["createdBy"] == user["id"]
        assert task["id"] and task["createdAt"] and task["updatedAt"]

    def test_create_requires_title(self, client, user_headers):
        response = client.post("/api/tasks", headers=user_headers, json={"description": "no title"})

        assert response.status_code == 400
        assert response.json()["errors"] == {"title": ["Title is required"]}

    def test_invalid_enum_is_validation_error(self, client, user_headers):
        response = client.post("/api/tasks", headers=user_headers, json={"title": "x", "priority": "whenever"})

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_get_unknown(self, client, user_headers):
        response = client.get("/api/tasks/6f1c1c5e-0d4b-4f7a-9d7e-2d6a4f0b9c11", headers=user_headers)

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Task not found"}

    def test_get_malformed_id(self, client, user_headers):
        response = client.get("/api/tasks/123", headers=user_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid task ID"

    def test_completing_stamps_completed_at(self, client, db, user_headers):
        task = create_task(client, user_headers)

        response = client.put(f"/api/tasks/{task['id']}", headers=user_headers, json={"status": "completed"})

        assert response.status_code == 200
        assert response.json()["data"]["completedAt"] is not None
        assert any(a["action"] == "status-change" for a in db.rows("activities"))

    def test_update_ignores_null_title_and_status(self, client, db, user_headers):
        task = create_task(client, user_headers, dueDate="2026-12-01T00:00:00Z")

        response = client.put(
            f"/api/tasks/{task['id']}",
            headers=user_headers,
            json={"title": None, "status": None, "dueDate": None},
        )

        assert response.status_code == 200
        stored = db.rows("tasks")[0]
        assert stored["title"] == "Call supplier"
        assert stored["status"] == "pending"
        assert stored["dueDate"] is None


class TestTaskPermissions:
    """Tests for task ownership checks."""

    def test_stranger_cannot_update(self, client, db, user_headers):
        task = create_task(client, user_headers)
        stranger = make_user(db)

        response = client.put(
            f"/api/tasks/{task['id']}",
            headers=auth_headers(stranger),
            json={"title": "Hijacked"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "You are not authorized to update this task"

    def test_assignee_can_update_but_not_delete(self, client, db, user_headers):
        assignee = make_user(db)
        task = create_task(client, user_headers, assignedTo=assignee["id"])

        update = client.put(f"/api/tasks/{task['id']}", headers=auth_headers(assignee), json={"priority": "high"})
        delete = client.delete(f"/api/tasks/{task['id']}", headers=auth_headers(assignee))

        assert update.status_code == 200
        assert delete.status_code == 403

    def test_admin_can_delete(self, client, db, user_headers, admin_headers):
        task = create_task(client, user_headers)

        response = client.delete(f"/api/tasks/{task['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert db.rows("tasks") == []


class TestTaskListing:
    """Tests for GET /api/tasks filters, sorting and paging."""

    def test_pagination(self, client, user_headers):
        for index in range(15):
            create_task(client, user_headers, title=f"Task {index}")

        response = client.get("/api/tasks?page=2&limit=5", headers=user_headers)
        body = response.json()

        assert body["success"] is True
        assert body["count"] == 5
        assert body["total"] == 15
        assert body["pagination"] == {"page": 2, "limit": 5, "totalPages": 3}

    def test_limit_is_clamped(self, client, user_headers):
        create_task(client, user_headers)

        body = client.get("/api/tasks?limit=1000", headers=user_headers).json()

        assert body["pagination"]["limit"] == 100

    def test_only_own_tasks_by_default(self, client, db, user_headers):
        create_task(client, user_headers)
        other = make_user(db)
        create_task(client, auth_headers(other), title="Not yours")

        body = client.get("/api/tasks", headers=user_headers).json()

        assert body["total"] == 1

    def test_admin_sees_all(self, client, db, user_headers, admin_headers):
        create_task(client, user_headers)
        create_task(client, admin_headers)

        body = client.get("/api/tasks?assignedTo=all", headers=admin_headers).json()

        assert body["total"] == 2

    def test_search_and_sort(self, client, user_headers):
        create_task(client, user_headers, title="Order paper")
        create_task(client, user_headers, title="Call courier")
        create_task(client, user_headers, title="Order toner")

        body = client.get("/api/tasks?search=order&sortBy=title&sortOrder=asc", headers=user_headers).json()

        assert [t["title"] for t in body["data"]] == ["Order paper", "Order toner"]


class TestActivityLogging:
    """Tests for the activity log side effect."""

    def test_log_failure_does_not_fail_request(self, client, db, user_headers):
        original_table = db.table

        def failing_table(name):
            if name == "activities":
                raise RuntimeError("activities table down")
            return original_table(name)

        with mock.patch.object(db, "table", side_effect=failing_table):
            response = client.post("/api/tasks", headers=user_headers, json={"title": "Still saved"})

        assert response.status_code == 201
        assert len(db.rows("tasks")) == 1
        assert db.rows("activities") == []
