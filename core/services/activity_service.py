# =============================================================================
# core/services/activity_service.py - Activity Log
# =============================================================================
# Writes and reads the append-only activity log.
#
# Logging an activity never fails the request that triggered it: store
# errors are logged and `log_activity` returns None.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from core.models.activity import ActivityAction, ActivityStatus, EntityType

logger = logging.getLogger(__name__)

TABLE = "activities"


class ActivityService:
    """Service for the activity log."""

    @staticmethod
    def log_activity(
        description: str,
        entity_type: EntityType | str,
        action: ActivityAction | str,
        user_id: str | None = None,
        entity_id: str | None = None,
        status: ActivityStatus | str = ActivityStatus.COMPLETED,
        metadata: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Append an activity to the log.

        Args:
            description: Human-readable summary
            entity_type: Kind of entity affected
            action: What happened
            user_id: Who did it
            entity_id: Which document was affected
            status: Outcome of the action
            metadata: Extra context (ids, old/new values)

        Returns:
            The stored activity, or None if it could not be written
        """
        data = {
            "description": description,
            "entityType": EntityType(entity_type).value,
            "entityId": entity_id,
            "action": ActivityAction(action).value,
            "status": ActivityStatus(status).value,
            "userId": user_id,
            "metadata": metadata or {},
        }

        try:
            return SupabaseClient.insert_document(TABLE, data)
        except Exception as e:
            logger.error(f"Failed to log activity '{description}': {e}")
            return None

    # -------------------------------------------------------------------------
    # Auth
    # -------------------------------------------------------------------------

    @staticmethod
    def log_user_login(user_id: str) -> dict[str, Any] | None:
        return ActivityService.log_activity(
            description="User logged in",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.LOGIN,
            user_id=user_id,
        )

    @staticmethod
    def log_user_logout(user_id: str) -> dict[str, Any] | None:
        return ActivityService.log_activity(
            description="User logged out",
            entity_type=EntityType.USER,
            entity_id=user_id,
            action=ActivityAction.LOGOUT,
            user_id=user_id,
        )

    # -------------------------------------------------------------------------
    # Tasks
    # -------------------------------------------------------------------------

    @staticmethod
    def log_task_create(task: dict[str, Any], user_id: str) -> dict[str, Any] | None:
        return ActivityService.log_activity(
            description=f'Task "{task.get("title")}" created',
            entity_type=EntityType.TASK,
            entity_id=task.get("id"),
            action=ActivityAction.CREATE,
            user_id=user_id,
            metadata={"taskId": task.get("id")},
        )

    @staticmethod
    def log_task_update(task: dict[str, Any], user_id: str) -> dict[str, Any] | None:
        return ActivityService.log_activity(
            description=f'Task "{task.get("title")}" updated',
            entity_type=EntityType.TASK,
            entity_id=task.get("id"),
            action=ActivityAction.UPDATE,
            user_id=user_id,
            metadata={"taskId": task.get("id")},
        )

    @staticmethod
    def log_task_status_change(
        task: dict[str, Any],
        old_status: str,
        new_status: str,
        user_id: str,
    ) -> dict[str, Any] | None:
        return ActivityService.log_activity(
            description=f'Task "{task.get("title")}" status changed from {old_status} to {new_status}',
            entity_type=EntityType.TASK,
            entity_id=task.get("id"),
            action=ActivityAction.STATUS_CHANGE,
            user_id=user_id,
            metadata={"oldStatus": old_status, "newStatus": new_status},
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def get_recent_activities(
        limit: int = 10,
        user_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Most recent activities, newest first.

        Args:
            limit: Maximum number of activities
            user_id: Only this user's activities, if given
        """
        client = SupabaseClient.get_client()

        query = client.table(TABLE).select("*")
        if user_id:
            query = query.eq("userId", user_id)

        response = query.order("createdAt", desc=True).limit(limit).execute()
        return response.data or []
