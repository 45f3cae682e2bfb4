# =============================================================================
# tests/test_dashboard.py - Dashboard, System Status & Health Tests
# =============================================================================

from unittest import mock

import pytest

from app.exceptions import ApiError
from core.services.system_status_service import DEFAULT_COMPONENTS, SystemStatusService
from lib.utils import days_from_now
from tests.conftest import auth_headers, make_user
from tests.test_tasks import create_task


class TestDashboard:
    """Tests for /api/dashboard."""

    def test_stats(self, client, db, user, user_headers, admin_headers):
        create_task(client, user_headers, title="Mine pending")
        create_task(client, user_headers, title="Mine done", status="completed")
        create_task(client, admin_headers, title="Admin's")
        make_user(db, is_active=False)

        data = client.get("/api/dashboard/stats", headers=user_headers).json()["data"]

        assert data["usersCount"] == 2
        assert data["tasksCount"] == 3
        assert data["pendingTasksCount"] == 2
        assert data["completedTasksCount"] == 1
        assert data["userTasksCount"] == 2
        assert data["userPendingTasksCount"] == 1
        assert data["userCompletedTasksCount"] == 1
        assert data["activitiesCount"] == 3

    def test_activities_newest_first(self, client, db, user_headers, admin_headers):
        db.seed(
            "activities",
            {"id": "a1", "description": "old", "userId": "someone", "createdAt": days_from_now(-2)},
            {"id": "a2", "description": "new", "userId": "someone", "createdAt": days_from_now(-1)},
        )

        body = client.get("/api/dashboard/activities?limit=1", headers=user_headers).json()

        assert body["count"] == 1
        assert body["data"][0]["description"] == "new"

    def test_only_my_activities(self, client, db, user, user_headers):
        db.seed(
            "activities",
            {"id": "a1", "description": "theirs", "userId": "someone", "createdAt": days_from_now(-1)},
            {"id": "a2", "description": "mine", "userId": user["id"], "createdAt": days_from_now(-2)},
        )

        body = client.get("/api/dashboard/activities?onlyMine=true", headers=user_headers).json()

        assert [a["description"] for a in body["data"]] == ["mine"]

    def test_tasks_soonest_due_first(self, client, user_headers):
        """Tasks without a due date sort last."""
        create_task(client, user_headers, title="No due date")
        create_task(client, user_headers, title="Next week", dueDate=days_from_now(7))
        create_task(client, user_headers, title="Tomorrow", dueDate=days_from_now(1))

        body = client.get("/api/dashboard/tasks", headers=user_headers).json()

        assert [t["title"] for t in body["data"]] == ["Tomorrow", "Next week", "No due date"]

    def test_system_status_seeds_and_probes(self, client, db, user_headers):
        """Components are created on first read and Database is re-probed."""
        body = client.get("/api/dashboard/system-status", headers=user_headers).json()

        names = [c["name"] for c in body["data"]]
        assert names == sorted(c["name"] for c in DEFAULT_COMPONENTS)
        database = next(c for c in body["data"] if c["name"] == "Database")
        assert database["status"] == "operational"
        assert database["description"].startswith("Response time: ")

    def test_system_status_survives_database_check_failure(self, client, db, user_headers):
        """A failing database check still returns every component."""
        with mock.patch.object(
            SystemStatusService, "check_database_health", side_effect=RuntimeError("connection reset")
        ) as check:
            response = client.get("/api/dashboard/system-status", headers=user_headers)

        body = response.json()
        assert response.status_code == 200
        assert check.called
        assert body["count"] == len(DEFAULT_COMPONENTS)
        assert len(body["data"]) == len(DEFAULT_COMPONENTS)


class TestSystemStatusService:
    """Tests for SystemStatusService."""

    def test_initialize_is_idempotent(self, db):
        assert SystemStatusService.initialize_system_components() == len(DEFAULT_COMPONENTS)
        assert SystemStatusService.initialize_system_components() == 0
        assert len(db.rows("system_status")) == len(DEFAULT_COMPONENTS)

    def test_initialize_failure_is_logged_not_raised(self, db):
        db.fail_queries = True

        assert SystemStatusService.initialize_system_components() == 0

    def test_database_outage_recorded(self, db):
        """Only the probe query fails; the status row is still writable."""
        SystemStatusService.initialize_system_components()
        original_table = db.table

        def failing_users(name):
            if name == "users":
                raise RuntimeError("connection refused")
            return original_table(name)

        db.table = failing_users
        assert SystemStatusService.check_database_health() is False

        database = next(c for c in db.rows("system_status") if c["name"] == "Database")
        assert database["status"] == "outage"
        assert database["description"] == "Database connection failed"

    def test_status_change_logged_for_user(self, db):
        SystemStatusService.initialize_system_components()

        SystemStatusService.update_component_status("Notifications", "maintenance", user_id="u1")

        assert [a["action"] for a in db.rows("activities")] == ["status-change"]

    def test_unknown_component(self, db):
        SystemStatusService.initialize_system_components()

        with pytest.raises(ApiError) as exc_info:
            SystemStatusService.update_component_status("Teleporter", "outage")

        assert exc_info.value.status_code == 404


class TestHealth:
    """Tests for the health probes and error envelope."""

    def test_healthy(self, client, db):
        body = client.get("/api/health").json()

        assert body["status"] == "healthy"
        assert body["checks"] == {"database": "healthy"}
        assert body["environment"] == "development"

    def test_degraded_when_store_unreachable(self, client, db):
        db.fail_queries = True

        body = client.get("/api/health").json()

        assert body["status"] == "degraded"
        assert body["checks"]["database"] == "unhealthy"

    def test_live_and_root(self, client, db):
        assert client.get("/api/health/live").json()["status"] == "alive"
        assert client.get("/").json()["health"] == "/api/health"

    def test_unknown_route_uses_envelope(self, client, db):
        response = client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False

    def test_guest_is_authenticated(self, client, db):
        guest = make_user(db, role="guest")
        assert client.get("/api/dashboard/stats", headers=auth_headers(guest)).status_code == 200
