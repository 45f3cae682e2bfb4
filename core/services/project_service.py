# =============================================================================
# core/services/project_service.py - Project Business Logic
# =============================================================================
# Handles project CRUD, attached documents and statistics.
#
# Permissions:
#   Update: admin, account manager or creator
#   Delete: blocked while milestones reference the project
# =============================================================================

import json
import logging
from collections import Counter
from typing import Any

from lib.supabase_client import SupabaseClient
from lib.utils import days_from_now, is_valid_id, new_id, parse_datetime, resolve_sort, utc_now, utc_now_iso
from core.models.activity import ActivityAction, EntityType
from core.models.base import AttachedDocument
from core.models.project import ProjectCreate, ProjectStatus, ProjectUpdate
from core.services.activity_service import ActivityService
from core.services.customer_service import CustomerService
from app.auth.models import AuthUser
from app.exceptions import ApiError, ForbiddenError, InvalidIdError, NotFoundError, require_fields

logger = logging.getLogger(__name__)

TABLE = "projects"
SORT_FIELDS = {"name", "status", "phase", "startDate", "targetCompletionDate", "budget", "createdAt", "updatedAt"}

REQUIRED_FIELDS = {
    "name": "Project name is required",
    "customer": "Customer is required",
    "accountManager": "Account manager is required",
    "startDate": "Start date is required",
    "objectives": "At least one objective is required",
}

CLOSED_STATUSES = {ProjectStatus.COMPLETED.value, ProjectStatus.CANCELLED.value}


def involved_user_clause(user_id: str) -> str:
    """
    PostgREST `or` filter for projects a user manages, created, or is a
    stakeholder of.
    """
    stakeholder = json.dumps([{"user": user_id}], separators=(",", ":"))
    return f"accountManager.eq.{user_id},createdBy.eq.{user_id},stakeholders.cs.{stakeholder}"


class ProjectService:
    """Service for project management operations."""

    @staticmethod
    def list_projects(
        page: int,
        limit: int,
        search: str | None = None,
        customer: str | None = None,
        status: str | None = None,
        phase: str | None = None,
        account_manager: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        involved_user: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        client = SupabaseClient.get_client()
        query = client.table(TABLE).select("*", count="exact")

        if search:
            clause = SupabaseClient.search_clause(search, ["name", "description"])
            if clause:
                query = query.or_(clause)
        if customer:
            query = query.eq("customer", customer)
        if status:
            query = query.eq("status", status)
        if phase:
            query = query.eq("phase", phase)
        if account_manager:
            query = query.eq("accountManager", account_manager)
        if from_date:
            query = query.gte("startDate", from_date)
        if to_date:
            query = query.lte("startDate", to_date)
        # Successive or_() groups are ANDed, so this narrows any search match
        if involved_user:
            query = query.or_(involved_user_clause(involved_user))

        column, descending = resolve_sort(sort_by, sort_order, SORT_FIELDS, "createdAt", "desc")
        return SupabaseClient.fetch_page(query, column, descending, page, limit)

    @staticmethod
    def get_project(project_id: str) -> dict[str, Any]:
        """
        Get a project by ID.

        Raises:
            InvalidIdError: If the ID is malformed
            NotFoundError: If the project doesn't exist
        """
        if not is_valid_id(project_id):
            raise InvalidIdError("project")

        project = SupabaseClient.fetch_document(TABLE, project_id)
        if not project:
            raise NotFoundError("Project")
        return project

    @staticmethod
    def get_stats() -> dict[str, Any]:
        projects = SupabaseClient.fetch_all(TABLE)

        now = utc_now()
        thirty_days_ago = parse_datetime(days_from_now(-30))
        ninety_days_ahead = parse_datetime(days_from_now(90))

        recent = 0
        upcoming = 0
        for project in projects:
            started = parse_datetime(project.get("startDate"))
            if started and started >= thirty_days_ago:
                recent += 1
            target = parse_datetime(project.get("targetCompletionDate"))
            if (
                target
                and now <= target <= ninety_days_ahead
                and project.get("status") not in CLOSED_STATUSES
            ):
                upcoming += 1

        return {
            "totalProjects": len(projects),
            "statusBreakdown": dict(Counter(p.get("status") for p in projects)),
            "phaseBreakdown": dict(Counter(p.get("phase") for p in projects)),
            "totalBudget": sum(p.get("budget") or 0 for p in projects),
            "recentProjectsCount": recent,
            "upcomingCompletionsCount": upcoming,
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_project(payload: ProjectCreate, user: AuthUser) -> dict[str, Any]:
        """
        Create a project for an existing customer.

        Raises:
            MissingFieldsError: If a required field is absent
            NotFoundError: If the customer doesn't exist
        """
        data = payload.to_document()
        require_fields(data, REQUIRED_FIELDS)

        CustomerService.get_customer(data["customer"])

        data["documents"] = []
        data["createdBy"] = user.id
        if data["status"] == ProjectStatus.COMPLETED.value:
            data["actualCompletionDate"] = utc_now_iso()

        project = SupabaseClient.insert_document(TABLE, data)
        logger.info(f"Created project: {project['id']}")

        ActivityService.log_activity(
            description=f'Project "{project["name"]}" created',
            entity_type=EntityType.PROJECT,
            entity_id=project["id"],
            action=ActivityAction.CREATE,
            user_id=user.id,
            metadata={"customerId": project["customer"]},
        )
        return project

    @staticmethod
    def update_project(project_id: str, payload: ProjectUpdate, user: AuthUser) -> dict[str, Any]:
        project = ProjectService.get_project(project_id)

        if not (
            user.is_admin
            or project.get("accountManager") == user.id
            or project.get("createdBy") == user.id
        ):
            raise ForbiddenError("You do not have permission to update this project")

        changes = payload.to_document(partial=True)

        if changes.get("customer") and changes["customer"] != project.get("customer"):
            CustomerService.get_customer(changes["customer"])

        old_status = project.get("status")
        new_status = changes.get("status")
        if new_status == ProjectStatus.COMPLETED.value and old_status != new_status:
            changes["actualCompletionDate"] = utc_now_iso()

        updated = SupabaseClient.update_document(TABLE, project_id, changes)
        if not updated:
            raise NotFoundError("Project")

        if new_status and new_status != old_status:
            ActivityService.log_activity(
                description=f'Project "{updated["name"]}" status changed from {old_status} to {new_status}',
                entity_type=EntityType.PROJECT,
                entity_id=project_id,
                action=ActivityAction.STATUS_CHANGE,
                user_id=user.id,
                metadata={"oldStatus": old_status, "newStatus": new_status},
            )
        else:
            ActivityService.log_activity(
                description=f'Project "{updated["name"]}" updated',
                entity_type=EntityType.PROJECT,
                entity_id=project_id,
                action=ActivityAction.UPDATE,
                user_id=user.id,
            )
        return updated

    @staticmethod
    def delete_project(project_id: str, user: AuthUser) -> None:
        project = ProjectService.get_project(project_id)

        milestones = SupabaseClient.count_documents("milestones", project=project_id)
        if milestones > 0:
            raise ApiError(
                f"Cannot delete project: {milestones} milestone(s) are associated with this project",
                status_code=400,
            )

        SupabaseClient.delete_document(TABLE, project_id)
        logger.info(f"Deleted project: {project_id}")

        ActivityService.log_activity(
            description=f'Project "{project.get("name")}" deleted',
            entity_type=EntityType.PROJECT,
            entity_id=project_id,
            action=ActivityAction.DELETE,
            user_id=user.id,
        )

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    @staticmethod
    def add_document(project_id: str, payload: AttachedDocument, user: AuthUser) -> dict[str, Any]:
        """
        Attach a document to a project.

        Returns:
            The stored document entry
        """
        if not payload.title or not payload.file_url:
            raise ApiError("Please provide document title and file URL", status_code=400)

        project = ProjectService.get_project(project_id)

        document = {
            "id": new_id(),
            "title": payload.title,
            "fileUrl": payload.file_url,
            "category": payload.category or "other",
            "uploadedBy": user.id,
            "uploadedAt": utc_now_iso(),
        }
        documents = [*(project.get("documents") or []), document]
        SupabaseClient.update_document(TABLE, project_id, {"documents": documents})

        ActivityService.log_activity(
            description=f'Document "{document["title"]}" added to project "{project.get("name")}"',
            entity_type=EntityType.PROJECT,
            entity_id=project_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"documentId": document["id"]},
        )
        return document

    @staticmethod
    def remove_document(project_id: str, document_id: str, user: AuthUser) -> None:
        project = ProjectService.get_project(project_id)
        documents = project.get("documents") or []

        remaining = [doc for doc in documents if doc.get("id") != document_id]
        if len(remaining) == len(documents):
            raise ApiError("Document not found in this project", status_code=404)

        SupabaseClient.update_document(TABLE, project_id, {"documents": remaining})

        ActivityService.log_activity(
            description=f'Document removed from project "{project.get("name")}"',
            entity_type=EntityType.PROJECT,
            entity_id=project_id,
            action=ActivityAction.UPDATE,
            user_id=user.id,
            metadata={"documentId": document_id},
        )
