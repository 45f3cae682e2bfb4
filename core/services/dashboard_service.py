# =============================================================================
# core/services/dashboard_service.py - Dashboard Aggregates
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.task import TaskStatus
from core.services.activity_service import ActivityService
from core.services.system_status_service import SystemStatusService
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)


class DashboardService:
    """Read-only aggregates for the dashboard."""

    @staticmethod
    def get_stats(user: AuthUser) -> dict[str, Any]:
        pending = TaskStatus.PENDING.value
        completed = TaskStatus.COMPLETED.value

        return {
            "usersCount": SupabaseClient.count_documents("users", isActive=True),
            "tasksCount": SupabaseClient.count_documents("tasks"),
            "pendingTasksCount": SupabaseClient.count_documents("tasks", status=pending),
            "completedTasksCount": SupabaseClient.count_documents("tasks", status=completed),
            "activitiesCount": SupabaseClient.count_documents("activities"),
            "userTasksCount": SupabaseClient.count_documents("tasks", assignedTo=user.id),
            "userPendingTasksCount": SupabaseClient.count_documents(
                "tasks", assignedTo=user.id, status=pending
            ),
            "userCompletedTasksCount": SupabaseClient.count_documents(
                "tasks", assignedTo=user.id, status=completed
            ),
        }

    @staticmethod
    def get_activities(user: AuthUser, limit: int = 10, only_mine: bool = False) -> list[dict[str, Any]]:
        return ActivityService.get_recent_activities(limit=limit, user_id=user.id if only_mine else None)

    @staticmethod
    def get_tasks(user: AuthUser, status: str | None = None, limit: int = 5) -> list[dict[str, Any]]:
        """The caller's tasks, soonest due first."""
        client = SupabaseClient.get_client()
        query = client.table("tasks").select("*").eq("assignedTo", user.id)
        if status:
            query = query.eq("status", status)

        response = (
            query.order("dueDate", desc=False)
            .order("createdAt", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    @staticmethod
    def get_system_status() -> list[dict[str, Any]]:
        """
        Component status after making sure every component exists and
        re-probing the database.
        """
        SystemStatusService.initialize_system_components()
        try:
            SystemStatusService.check_database_health()
        except Exception as e:
            logger.error(f"Database status probe failed: {e}")
        return SystemStatusService.get_all_component_status()
