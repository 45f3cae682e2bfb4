# =============================================================================
# core/services/milestone_service.py - Milestone Business Logic
# =============================================================================
# Milestones belong to a project and may depend on each other.
#
# - Update: admin, owner or creator
# - Approve: admin or a listed reviewer, once per user
# - Progress: status follows the percentage (0 / 1-99 / 100)
# - Delete: blocked while other milestones depend on it
# =============================================================================

import logging
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import is_valid_id, resolve_sort, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.project import MilestoneCreate, MilestoneStatus, MilestoneUpdate, ProgressUpdate
from core.services.activity_service import ActivityService
from core.services.project_service import ProjectService
from app.auth.models import AuthUser
from app.exceptions import ApiError, ForbiddenError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "milestones"
SORT_FIELDS = {
    "title", "status", "priority", "progress",
    "startDate", "targetCompletionDate", "createdAt", "updatedAt",
}

REQUIRED_FIELDS = {
    "title": "Title is required",
    "project": "Project is required",
    "startDate": "Start date is required",
    "targetCompletionDate": "Target completion date is required",
    "owner": "Owner is required",
}


def status_for_progress(progress: float) -> str:
    if progress == 0:
        return MilestoneStatus.NOT_STARTED.value
    if progress == 100:
        return MilestoneStatus.COMPLETED.value
    return MilestoneStatus.IN_PROGRESS.value


class MilestoneService:
    """Service for milestone operations."""

    @staticmethod
    def list_milestones(
        user: AuthUser,
        page: int,
        limit: int,
        search: str | None = None,
        project: str | None = None,
        status: str | None = None,
        owner: str | None = None,
        priority: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        my_milestones: bool = False,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["title", "description"])
            if clause:
                query = query.or_(clause)
        if project:
            query = query.eq("project", project)
        if status:
            query = query.eq("status", status)
        if owner:
            query = query.eq("owner", owner)
        if priority:
            query = query.eq("priority", priority)
        if from_date:
            query = query.gte("targetCompletionDate", from_date)
        if to_date:
            query = query.lte("targetCompletionDate", to_date)
        # Successive or_() groups are ANDed, so this narrows any search match
        if my_milestones:
            query = query.or_(f"owner.eq.{user.id},createdBy.eq.{user.id},reviewers.cs.{{{user.id}}}")

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "targetCompletionDate")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_milestone(milestone_id: str) -> dict[str, Any]:
        if not is_valid_id(milestone_id):
            raise InvalidIdError("milestone")

        milestone = SupabaseClient.fetch_document(TABLE, milestone_id)
        if not milestone:
            raise NotFoundError("Milestone")
        return milestone

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_milestone(payload: MilestoneCreate, user: AuthUser) -> dict[str, Any]:
        """
        Create a milestone under an existing project.

        Raises:
            MissingFieldsError: If a required field is absent
            NotFoundError: If the project doesn't exist
        """
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        project = ProjectService.get_project(data["project"])

        data["approvedBy"] = []
        data["createdBy"] = user.id
        if data["status"] == MilestoneStatus.COMPLETED.value:
            data["actualCompletionDate"] = utc_now_iso()

        milestone = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created milestone: {milestone['id']} in project: {project['id']}")

        ActivityService.log_activity(
            description=f'Milestone "{milestone["title"]}" created in project "{project.get("name")}"',
            entity_type=EntityType.MILESTONE,
            entity_id=milestone["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"projectId": project["id"]},
        )
        return milestone

    @staticmethod
    def update_milestone(milestone_id: str, payload: MilestoneUpdate, user: AuthUser) -> dict[str, Any]:
        milestone = MilestoneService.get_milestone(milestone_id)

        if not (
            user.is_admin
            or milestone.get("owner") == user.id
            or milestone.get("createdBy") == user.id
        ):
            raise ForbiddenError("You do not have permission to update this milestone")

        changes = payload.to_document(partial=True)
        if (
            changes.get("status") == MilestoneStatus.COMPLETED.value
            and milestone.get("status") != MilestoneStatus.COMPLETED.value
        ):
            changes["actualCompletionDate"] = utc_now_iso()

        updated = SupabaseClient.update_document(TABLE, milestone_id, changes)
        if not updated:
            raise NotFoundError("Milestone")

        ActivityService.log_activity(
            description=f'Milestone "{updated["title"]}" updated',
            entity_type=EntityType.MILESTONE,
            entity_id=milestone_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
        )
        return updated

    @staticmethod
    def delete_milestone(milestone_id: str, user: AuthUser) -> None:
        """
        Delete a milestone.

        Raises:
            ApiError: 400 while other milestones list it as a dependency
        """
        milestone = MilestoneService.get_milestone(milestone_id)

        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .select("id", count="exact")
            .contains("dependencies", [milestone_id])
            .execute()
        )
        dependants = response.count or 0
        if dependants > 0:
            raise ApiError(
                f"Cannot delete milestone: {dependants} other milestone(s) depend on this milestone",
                status_code=400,
            )

        SupabaseClient.delete_document(TABLE, milestone_id)
        logger.info(f"Deleted milestone: {milestone_id}")

        ActivityService.log_activity(
            description=f'Milestone "{milestone.get("title")}" deleted',
            entity_type=EntityType.MILESTONE,
            entity_id=milestone_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )

    @staticmethod
    def approve_milestone(milestone_id: str, user: AuthUser) -> dict[str, Any]:
        """
        Record the caller's approval.

        Returns:
            Dict with the updated `approvedBy` list
        """
        milestone = MilestoneService.get_milestone(milestone_id)

        if not (user.is_admin or user.id in (milestone.get("reviewers") or [])):
            raise ForbiddenError("You are not authorized to approve this milestone")

        approved_by = list(milestone.get("approvedBy") or [])
        if user.id in approved_by:
            raise ApiError("You have already approved this milestone", status_code=400)

        approved_by.append(user.id)
        SupabaseClient.update_document(TABLE, milestone_id, {"approvedBy": approved_by})

        ActivityService.log_activity(
            description=f'Milestone "{milestone.get("title")}" approved',
            entity_type=EntityType.MILESTONE,
            entity_id=milestone_id,
            action=ActivityAction.APPROVE,
            user_id=user.id,
        )
        return {"approvedBy": approved_by}

    @staticmethod
    def update_progress(milestone_id: str, payload: ProgressUpdate, user: AuthUser) -> dict[str, Any]:
        progress = payload.progress
        if progress is None or not 0 <= progress <= 100:
            raise ApiError("Progress must be a number between 0 and 100", status_code=400)

        milestone = MilestoneService.get_milestone(milestone_id)

        status = status_for_progress(progress)
        changes: dict[str, Any] = {"progress": progress, "status": status}
        if status == MilestoneStatus.COMPLETED.value:
            changes["actualCompletionDate"] = milestone.get("actualCompletionDate") or utc_now_iso()

        updated = SupabaseClient.update_document(TABLE, milestone_id, changes)
        if not updated:
            raise NotFoundError("Milestone")

        ActivityService.log_activity(
            description=f'Milestone "{updated["title"]}" progress set to {progress}%',
            entity_type=EntityType.MILESTONE,
            entity_id=milestone_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"progress": progress, "status": status},
        )
        return {
            "progress": updated.get("progress"),
            "status": updated.get("status"),
            "actualCompletionDate": updated.get("actualCompletionDate"),
        }
