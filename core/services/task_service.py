# =============================================================================
# core/services/task_service.py - Task Business Logic
# =============================================================================
# Handles task CRUD operations and ownership rules:
# - Update: admin, creator or assignee
# - Delete: admin or creator
# Every write is mirrored into the activity log.
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.task import TaskCreate, TaskStatus, TaskUpdate
from core.services.activity_service import ActivityService
from app.auth.models import AuthUser
from app.exceptions import ForbiddenError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "tasks"
SORT_FIELDS = {"createdAt", "updatedAt", "dueDate", "title", "priority", "status"}


class TaskService:
    """Service for task management operations."""

    @staticmethod
    def list_tasks(
        user: AuthUser,
        page: int,
        limit: int,
        status: str | None = None,
        priority: str | None = None,
        search: str | None = None,
        assigned_to: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List tasks, by default those assigned to the caller.

        Admins may pass `assigned_to="all"` or another user's ID.
        """
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if user.is_admin and assigned_to == "all":
            pass
        elif user.is_admin and assigned_to:
            query = query.eq("assignedTo", assigned_to)
        else:
            query = query.eq("assignedTo", user.id)

        if status:
            query = query.eq("status", status)
        if priority:
            query = query.eq("priority", priority)
        if search:
            clause = SupabaseClient.search_clause(search, ["title", "description"])
            if clause:
                query = query.or_(clause)

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_task(task_id: str) -> dict[str, Any]:
        """
        Get a task by ID.

        Raises:
            InvalidIdError: If the ID is malformed
            NotFoundError: If the task doesn't exist
        """
        if not is_valid_id(task_id):
            raise InvalidIdError("task")

        task = SupabaseClient.fetch_document(TABLE, task_id)
        if not task:
            raise NotFoundError("Task")
        return task

    @staticmethod
    def create_task(payload: TaskCreate, user: AuthUser) -> dict[str, Any]:
        data = payload.to_document()
        require_fields(data, {"title": "Title is required"})

        data["assignedTo"] = data.get("assignedTo") or user.id
        data["createdBy"] = user.id
        if data["status"] == TaskStatus.COMPLETED.value:
            data["completedAt"] = utc_now_iso()

        task = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created task: {task['id']} for user: {user.id}")

        ActivityService.log_task_create(task, user.id)
        return task

    @staticmethod
    def update_task(task_id: str, payload: TaskUpdate, user: AuthUser) -> dict[str, Any]:
        task = TaskService.get_task(task_id)

        if not (
            user.is_admin
            or task.get("createdBy") == user.id
            or task.get("assignedTo") == user.id
        ):
            raise ForbiddenError("You are not authorized to update this task")

        changes = payload.to_document(partial=True)
        old_status = task.get("status")
        new_status = changes.get("status")

        if new_status == TaskStatus.COMPLETED.value and old_status != new_status:
            changes["completedAt"] = utc_now_iso()

        updated = SupabaseClient.update_document(TABLE, task_id, changes)
        if not updated:
            raise NotFoundError("Task")

        if new_status and new_status != old_status:
            ActivityService.log_task_status_change(updated, old_status, new_status, user.id)
        else:
            ActivityService.log_task_update(updated, user.id)

        return updated

    @staticmethod
    def delete_task(task_id: str, user: AuthUser) -> None:
        task = TaskService.get_task(task_id)

        if not (user.is_admin or task.get("createdBy") == user.id):
            raise ForbiddenError("You are not authorized to delete this task")

        SupabaseClient.delete_document(TABLE, task_id)
        logger.info(f"Deleted task: {task_id}")

        ActivityService.log_activity(
            description=f'Task "{task.get("title")}" deleted',
            entity_type=EntityType.TASK,
            entity_id=task_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )
